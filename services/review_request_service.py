"""
Review request service.

Turns one scheduled-trigger invocation into zero or more review request
emails:

    compute window -> fetch unreviewed orders -> send one email per order

Fetch failures propagate (UpstreamFetchError) before anything is sent.
Send failures are isolated per order and recorded in that order's outcome.
"""

from __future__ import annotations

import asyncio
import os
from datetime import datetime
from typing import Callable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.email.protocol import (
    EmailAddress,
    EmailMessage,
    EmailProvider,
)
from infrastructure.orders.protocol import OrderSource
from schemas.dto.responses.review_request import ReviewRequestResponse, SendOutcome
from schemas.models.order import Order
from shared.datetime_utils import DeliveryWindow, compute_delivery_window, utc_now
from shared.logging import get_logger

log = get_logger(__name__)

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(__file__),
    "templates",
    "emails",
)

SUBJECT_TEMPLATE = "{first_name}, how are you liking your purchase?"


class ReviewRequestService:
    def __init__(
        self,
        order_source: OrderSource,
        email_provider: EmailProvider,
        settings: EmailSettings,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._orders = order_source
        self._clock = clock
        self._email = email_provider
        self._settings = settings
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )

    @property
    def sender(self) -> EmailAddress:
        return EmailAddress(
            address=self._settings.email_from_address,
            name=self._settings.email_from_name or None,
        )

    def compose(self, order: Order) -> EmailMessage:
        """Build the review request email for *order*."""
        first_name = order.first_name
        text = self._jinja.get_template("review_request.txt").render(
            first_name=first_name,
            product_name=order.product.name,
            sender_name=self._settings.email_from_name,
        )
        return EmailMessage(
            sender=self.sender,
            to=EmailAddress(address=order.user.email, name=order.user.name),
            subject=SUBJECT_TEMPLATE.format(first_name=first_name),
            text=text,
        )

    async def _dispatch(self, order: Order, limiter: asyncio.Semaphore) -> SendOutcome:
        async with limiter:
            try:
                receipt = await self._email.send(self.compose(order))
            except Exception as e:
                log.warning(
                    "review_request_failed",
                    order_id=order.id,
                    user_id=order.user.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return SendOutcome.failed(str(e) or type(e).__name__)

        log.info(
            "review_request_sent",
            order_id=order.id,
            user_id=order.user.id,
            message_id=receipt.message_id,
        )
        return SendOutcome.sent(receipt.message_id, receipt.preview_url)

    async def send_all(self, orders: list[Order]) -> list[SendOutcome]:
        """Send one email per order; outcomes line up with *orders* by index."""
        limiter = asyncio.Semaphore(max(1, self._settings.email_max_concurrency))
        return list(
            await asyncio.gather(*(self._dispatch(order, limiter) for order in orders))
        )

    async def run(self, now: Optional[datetime] = None) -> ReviewRequestResponse:
        window: DeliveryWindow = compute_delivery_window(
            now if now is not None else self._clock()
        )
        orders = await self._orders.fetch_unreviewed_orders(window)
        outcomes = await self.send_all(orders)

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        log.info(
            "review_requests_completed",
            total=len(outcomes),
            sent=len(outcomes) - failed,
            failed=failed,
        )
        return ReviewRequestResponse(outcomes=outcomes)
