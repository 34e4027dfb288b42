"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from amcmcp.main import create_app
from amcmcp.services.amc_client import AMCClient

Routes = dict[str, Any]


def make_amc_client(routes: Routes, calls: list[httpx.Request] | None = None) -> AMCClient:
    """
    AMCClient backed by an httpx.MockTransport.

    ``routes`` maps a URL path (relative to /v2) to a JSON body, an
    ``httpx.Response``, or an exception to raise. Unknown paths answer 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        path = request.url.path.removeprefix("/v2")
        answer = routes.get(path)
        if answer is None:
            return httpx.Response(404, json={"message": f"No route for {path}"})
        if isinstance(answer, httpx.Response):
            return answer
        if isinstance(answer, Exception):
            raise answer
        return httpx.Response(200, json=answer)

    return AMCClient(
        api_key="test-key",
        base_url="https://api.amctheatres.com/v2",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def amc_client_factory() -> Callable[..., AMCClient]:
    return make_amc_client


@pytest.fixture
def test_app() -> FastAPI:
    """App without the startup lifespan (no API key check, no browser), for API tests."""
    return create_app(use_lifespan=False)
