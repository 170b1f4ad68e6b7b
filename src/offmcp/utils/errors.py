"""Standardized error handling for the Open Food Facts MCP server.

Provides:
- OFFError hierarchy: the exceptions raised by the client, resolver and tools
- ErrorCodes: Enumeration of all error codes
- ToolErrorDetail: Pydantic model for structured tool error payloads
- Exception handlers for the FastAPI transport app

Every tool error follows a consistent schema:
{
    "error": "ERROR_CODE",
    "message": "Human-readable message",
    "tool": "searchProducts",
    "arguments": {...},
    "call_id": "uuid"  # For tracing
}
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from offmcp.utils.logging import get_call_id

logger = logging.getLogger(__name__)


class ErrorCodes:
    """Centralized error codes."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UPSTREAM_MALFORMED = "UPSTREAM_MALFORMED"
    SAMPLING_FAILED = "SAMPLING_FAILED"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Status code to error code mapping
    _STATUS_MAP = {
        400: "INVALID_ARGUMENT",
        404: "NOT_FOUND",
        422: "INVALID_ARGUMENT",
        502: "UPSTREAM_UNAVAILABLE",
        503: "UPSTREAM_UNAVAILABLE",
    }

    @classmethod
    def from_status(cls, status_code: int) -> str:
        """Map HTTP status code to error code."""
        return cls._STATUS_MAP.get(status_code, cls.INTERNAL_ERROR)


class OFFError(Exception):
    """Base class for every expected failure inside the server."""

    code = ErrorCodes.INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgument(OFFError):
    """Malformed barcode, missing required field, bad enum value."""

    code = ErrorCodes.INVALID_ARGUMENT


class NotFound(OFFError):
    """A normal "nothing there" outcome (unknown product, resource, prompt)."""

    code = ErrorCodes.NOT_FOUND


class UpstreamError(OFFError):
    """An upstream Open Food Facts service could not serve the request."""

    def __init__(self, service: str, message: str, status_code: int | None = None):
        self.service = service
        self.status_code = status_code
        super().__init__(message)


class UpstreamUnavailable(UpstreamError):
    """Non-2xx status, timeout or connection failure."""

    code = ErrorCodes.UPSTREAM_UNAVAILABLE


class UpstreamMalformed(UpstreamError):
    """Response was not JSON or lacked the expected top-level keys."""

    code = ErrorCodes.UPSTREAM_MALFORMED


class SamplingFailed(OFFError):
    """The connected client could not produce an LLM completion."""

    code = ErrorCodes.SAMPLING_FAILED


class ToolErrorDetail(BaseModel):
    """Structured error payload returned across the tool boundary."""

    error: str
    message: str
    tool: str | None = None
    arguments: dict[str, Any] | None = None
    status_code: int | None = None
    call_id: str | None = None


def tool_error(exc: Exception, tool: str, arguments: dict[str, Any] | None = None) -> ToolErrorDetail:
    """Convert an exception into a safe structured error.

    Expected failures (OFFError) keep their message since it is written
    for the calling agent. Anything else is logged with its traceback and
    reported with a generic message, preventing internal details from leaking.
    """
    if isinstance(exc, OFFError):
        return ToolErrorDetail(
            error=exc.code,
            message=exc.message,
            tool=tool,
            arguments=arguments,
            status_code=getattr(exc, "status_code", None),
            call_id=get_call_id(),
        )

    logger.exception("Unexpected error during %s", tool)
    return ToolErrorDetail(
        error=ErrorCodes.INTERNAL_ERROR,
        message=f"An error occurred during {tool}. Please try again.",
        tool=tool,
        arguments=arguments,
        call_id=get_call_id(),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with the standardized format."""
    detail = ToolErrorDetail(error=ErrorCodes.from_status(exc.status_code), message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=detail.model_dump(exclude_none=True))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with the standardized format."""
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    detail = ToolErrorDetail(
        error=ErrorCodes.INVALID_ARGUMENT,
        message=f"Request validation failed: {', '.join(fields)}",
    )
    return JSONResponse(status_code=422, content=detail.model_dump(exclude_none=True))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with the standardized format.

    SECURITY: Never expose internal error details to clients.
    """
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    detail = ToolErrorDetail(error=ErrorCodes.INTERNAL_ERROR, message="An unexpected error occurred")
    return JSONResponse(status_code=500, content=detail.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI transport app."""
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)  # type: ignore[arg-type]
