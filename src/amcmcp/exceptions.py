"""Error types and the FastAPI handlers that turn them into JSON responses."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
AMC_API_ERROR = "AMC_API_ERROR"
BOOKING_ERROR = "BOOKING_ERROR"
RESERVATION_ERROR = "RESERVATION_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"
NOT_FOUND = "NOT_FOUND"


class AMCClientError(Exception):
    """Base class for failures talking to the AMC vendor API."""


class AMCAPIError(AMCClientError):
    """The AMC API answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str = "AMC API request failed",
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(f"{status_code}: {message}")


class AMCNetworkError(AMCClientError):
    """The AMC API could not be reached (DNS, connect, timeout, ...)."""


class ToolError(Exception):
    """A tool call failed with one of the stable error codes."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, message: str, details: Any | None = None) -> None:
        self.error = error
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ToolError)
    async def tool_error_handler(request: Request, exc: ToolError) -> JSONResponse:
        logger.warning(f"{request.url.path} failed with {exc.error}: {exc.message} ({exc.details})")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": VALIDATION_ERROR,
                "message": "Request body must be a JSON object",
                "details": [str(err.get("msg")) for err in exc.errors()],
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": NOT_FOUND, "message": f"Route {request.url.path} not found"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": UNKNOWN_ERROR, "message": str(exc.detail)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": UNKNOWN_ERROR, "message": "An internal server error occurred"},
        )
