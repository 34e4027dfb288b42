"""Tool manifest and session diagnostics endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from amcmcp import __version__
from amcmcp.api.deps import get_tools
from amcmcp.tools import AMCTools

router = APIRouter()


@router.get("/manifest.json", tags=["discovery"])
async def get_manifest(tools: AMCTools = Depends(get_tools)) -> dict[str, Any]:
    """Describe the available tools and their input schemas."""
    return {
        "name": "amc-mcp-server",
        "version": __version__,
        "description": "MCP server for AMC Theatres APIs",
        "tools": tools.get_tool_definitions(),
    }


@router.get("/sessions", tags=["discovery"])
async def get_sessions(tools: AMCTools = Depends(get_tools)) -> dict[str, Any]:
    """Users who completed a booking since the process started."""
    sessions = tools.list_sessions()
    return {
        "sessions": [s.model_dump(mode="json", by_alias=True) for s in sessions],
        "totalCount": len(sessions),
    }
