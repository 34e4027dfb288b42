"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from amcmcp import __version__
from amcmcp.api.routes import discovery, health, tools
from amcmcp.booking import BookingDriver, BrowserManager, SessionStore
from amcmcp.config import settings
from amcmcp.exceptions import register_exception_handlers
from amcmcp.services.amc_client import AMCClient
from amcmcp.tools import AMCTools

logger = logging.getLogger(__name__)


def build_tools() -> AMCTools:
    """Wire the AMC client, shared browser and session store together."""
    if not settings.amc_api_key:
        raise RuntimeError("AMC_API_KEY environment variable is required")

    client = AMCClient(api_key=settings.amc_api_key)
    sessions = SessionStore()
    driver = BookingDriver(browser=BrowserManager(), sessions=sessions)
    return AMCTools(client=client, driver=driver, sessions=sessions)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: refuse to serve without a working API key
    amc_tools = build_tools()
    logger.info("Validating AMC API key...")
    if not await amc_tools.client.validate_key():
        await amc_tools.client.aclose()
        raise RuntimeError("AMC API key validation failed. Please check your API key.")
    logger.info("AMC API key validated successfully")

    app.state.tools = amc_tools
    for tool in amc_tools.get_tool_definitions():
        logger.info(f"Tool available: {tool['name']} - {tool['description']}")

    yield

    # Shutdown: close the shared browser and HTTP client
    if amc_tools.driver is not None:
        await amc_tools.driver.browser.shutdown()
    await amc_tools.client.aclose()
    logger.info("AMC MCP Server shut down")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI app; tests skip the lifespan and set app.state.tools themselves."""
    app = FastAPI(
        title="AMC MCP Server",
        description="Tool server for AMC Theatres APIs and website booking",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[] if settings.is_production else ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(discovery.router)
    app.include_router(tools.router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: run the server with uvicorn."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )
    logger.info(f"Starting AMC MCP Server on port {settings.port} ({settings.node_env})")
    uvicorn.run(app, host=settings.api_host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
