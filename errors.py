"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses.

Non-AppError exceptions bubble up as 500s (with Sentry reporting in production).
"""

from __future__ import annotations

from typing import Any, Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class AuthenticationError(AppError):
    """Missing or mismatched shared secret on an inbound trigger call.

    The scheduler expects the bare ``{"message": "Unauthorized"}`` body, so this
    error does not use the standard ``error``/``code`` envelope.
    """

    status_code = 401
    error_code = "authentication_error"

    def __init__(self, message: str = "Unauthorized", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict:
        return {"message": self.message}


class UpstreamFetchError(AppError):
    """The orders API call failed or returned an unexpected shape."""

    status_code = 502
    error_code = "upstream_error"


class DispatchError(AppError):
    """A single email could not be handed to the mail transport.

    Raised by email providers and caught per order by the review request
    service; it never reaches the exception handlers.
    """

    status_code = 502
    error_code = "dispatch_error"


def internal_error_response(exc: Exception) -> JSONResponse:
    """Log *exc* and build the generic 500 body."""
    sentry_sdk.capture_exception(exc)
    log.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "An internal server error occurred.", "code": "internal_error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        return internal_error_response(exc)
