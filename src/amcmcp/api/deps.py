"""FastAPI dependencies."""

from fastapi import Request

from amcmcp.services.amc_client import AMCClient
from amcmcp.tools import AMCTools


def get_tools(request: Request) -> AMCTools:
    """The AMCTools instance built at startup and kept on app.state."""
    return request.app.state.tools


def get_client(request: Request) -> AMCClient:
    return request.app.state.tools.client
