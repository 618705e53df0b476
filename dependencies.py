"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from config import AppSettings
from errors import AuthenticationError
from services.review_request_service import ReviewRequestService
from shared.logging import get_logger

log = get_logger(__name__)

SECRET_HEADER = "secret-authorization-string"


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_review_request_service(request: Request) -> ReviewRequestService:
    """Return the ReviewRequestService built in the app lifespan."""
    return request.app.state.review_request_service


async def verify_webhook_secret(
    provided: Optional[str] = Header(default=None, alias=SECRET_HEADER),
    settings: AppSettings = Depends(get_settings),
) -> None:
    """Reject the call unless the shared secret header matches exactly."""
    expected = settings.webhook.webhook_secret
    if not expected:
        log.warning("webhook_unauthorized", reason="secret_not_configured")
        raise AuthenticationError()
    # TODO: switch to hmac.compare_digest; plain equality leaks timing.
    if provided is None or provided != expected:
        log.warning(
            "webhook_unauthorized",
            reason="missing_header" if provided is None else "mismatch",
        )
        raise AuthenticationError()
