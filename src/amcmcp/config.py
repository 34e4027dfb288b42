"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AMC vendor API
    amc_api_key: str = ""
    amc_api_base_url: str = "https://api.amctheatres.com/v2"
    amc_api_timeout: float = 10.0

    # AMC consumer website (browser automation target)
    amc_site_url: str = "https://www.amctheatres.com"

    # Browser automation tuning (diagnostic aids)
    amc_test_headless: bool = True
    amc_test_slow_mo: int = 0  # milliseconds between browser actions

    # Per-step browser timeouts (milliseconds)
    login_timeout_ms: int = 10000
    seat_map_timeout_ms: int = 15000
    confirmation_timeout_ms: int = 20000

    # API settings
    api_host: str = "0.0.0.0"
    port: int = 3000
    node_env: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.node_env.lower() == "production"


# Global settings instance
settings = Settings()
