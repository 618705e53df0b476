"""
Health check endpoint.

GET /health: reports whether the webhook can do its job.
Rules:
- Webhook secret, orders API endpoint and email transport must all be
  configured; any missing one → "unhealthy" (503).
- No outbound calls are made; the scheduler may poll this freely.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(request: Request) -> JSONResponse:
    settings = request.app.state.settings
    checks: dict[str, str] = {
        "webhook_secret": "ok" if settings.webhook.webhook_secret else "not_configured",
        "orders_api": "ok" if settings.orders_api.orders_api_url else "not_configured",
        "email_transport": "ok" if settings.email.is_configured else "not_configured",
    }

    overall = "healthy" if all(v == "ok" for v in checks.values()) else "unhealthy"
    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "checks": checks},
    )
