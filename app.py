"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.smtp import SmtpEmailProvider
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from infrastructure.orders.graphql import GraphQLOrderSource
from routes.health_routes import router as health_router
from routes.review_request_routes import router as review_request_router
from services.review_request_service import ReviewRequestService
from shared.log_context import setup_logging_middleware
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def build_email_provider(
    settings: AppSettings, http_client: HttpClient
) -> EmailProvider:
    if settings.email.email_transport == "zeptomail":
        return ZeptoMailProvider(settings.email, http_client)
    return SmtpEmailProvider(settings.email)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        orders_http = HttpClient(timeout=settings.orders_api.orders_api_timeout_seconds)
        email_http = HttpClient(timeout=settings.email.email_timeout_seconds)

        app.state.settings = settings
        app.state.review_request_service = ReviewRequestService(
            order_source=GraphQLOrderSource(settings.orders_api, orders_http),
            email_provider=build_email_provider(settings, email_http),
            settings=settings.email,
        )
        log.info(
            "webhook_started",
            env=settings.env,
            email_transport=settings.email.email_transport,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await orders_http.aclose()
        await email_http.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    setup_logging_middleware(app)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(review_request_router)

    return app
