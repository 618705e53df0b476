"""OrderSource protocol — services depend on this, not the concrete implementation."""

from typing import Protocol

from schemas.models.order import Order
from shared.datetime_utils import DeliveryWindow


class OrderSource(Protocol):
    async def fetch_unreviewed_orders(self, window: DeliveryWindow) -> list[Order]: ...
