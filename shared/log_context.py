"""
Request logging middleware for the FastAPI app.

Provides:
- Request ID generation for correlation (bound into structlog contextvars)
- Request/response logging with timing
- X-Request-ID response header, including on unhandled-error 500s
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request

from errors import internal_error_response
from shared.logging import get_logger

log = get_logger("review_webhook.request")


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return f"req_{uuid.uuid4().hex[:12]}"


def log_request_end(status_code: int, duration_ms: int, request: Request) -> None:
    """Log the end of a request with timing and status."""
    if status_code >= 500:
        log_fn = log.error
    elif status_code >= 400:
        log_fn = log.warning
    else:
        log_fn = log.info

    log_fn(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def setup_logging_middleware(app: FastAPI) -> None:
    """Register the request logging middleware on *app*."""

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        started = time.perf_counter()
        request_id = generate_request_id()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            response = internal_error_response(exc)

        duration_ms = int((time.perf_counter() - started) * 1000)
        log_request_end(response.status_code, duration_ms, request)
        response.headers["X-Request-ID"] = request_id
        return response
