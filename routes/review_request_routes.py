"""
Scheduled-trigger webhook endpoint.

POST /review-request: called by the scheduler on each cron tick.
Rules:
- Bad or missing secret-authorization-string → 401 {"message": "Unauthorized"}
  before the body is read, the orders API is queried, or any email is sent.
- Orders API failure → 502, nothing sent.
- Otherwise 200 with one outcome per order, even when some sends failed.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from dependencies import get_review_request_service, verify_webhook_secret
from schemas.dto.requests.trigger import TriggerInvocation
from schemas.dto.responses.common import ErrorResponse, UnauthorizedResponse
from schemas.dto.responses.review_request import ReviewRequestResponse
from services.review_request_service import ReviewRequestService
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["review-requests"])


async def read_trigger_invocation(request: Request) -> Optional[TriggerInvocation]:
    """Parse the optional trigger body; anything unusable is logged and ignored."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return TriggerInvocation.model_validate_json(raw)
    except ValidationError as e:
        log.info("trigger_body_ignored", error_type=type(e).__name__)
        return None


@router.post(
    "/review-request",
    response_model=ReviewRequestResponse,
    responses={
        401: {"model": UnauthorizedResponse},
        502: {"model": ErrorResponse},
    },
    dependencies=[Depends(verify_webhook_secret)],
)
async def send_review_requests(
    request: Request,
    service: ReviewRequestService = Depends(get_review_request_service),
) -> JSONResponse:
    invocation = await read_trigger_invocation(request)
    if invocation is not None:
        log.info("review_request_triggered", **invocation.log_context())

    result = await service.run()
    return JSONResponse(status_code=200, content=result.to_body())
