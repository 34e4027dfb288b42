"""Health check and API key validation endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from amcmcp.api.deps import get_client
from amcmcp.services.amc_client import AMCClient

logger = logging.getLogger(__name__)
router = APIRouter()

SERVICE_NAME = "AMC MCP Server"


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status, current UTC time and service name
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
    }


@router.get("/validate", tags=["health"])
async def validate_api_key(client: AMCClient = Depends(get_client)):
    """Check the configured AMC API key against the live API."""
    try:
        is_valid = await client.validate_key()
    except Exception as e:
        logger.error(f"Error validating API key: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"valid": False, "message": "Failed to validate API key"},
        )
    return {
        "valid": is_valid,
        "message": "API key is valid" if is_valid else "API key validation failed",
    }
