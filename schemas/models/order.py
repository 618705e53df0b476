"""
Order models as projected by ``ReviewRequestQuery``.

Orders are owned by the external data API; these models are read-only,
request-scoped views of the fields the review request email needs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

ExternalId = Union[int, str]


class OrderUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: ExternalId
    name: str
    email: str

    @property
    def first_name(self) -> str:
        """First whitespace-delimited token of the full name ("" when blank)."""
        parts = self.name.split()
        return parts[0] if parts else ""


class OrderProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: ExternalId
    name: str


class Order(BaseModel):
    """A delivered order that has not been reviewed yet."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[ExternalId] = None
    delivery_date: Optional[datetime] = None
    is_reviewed: Optional[bool] = None
    user: OrderUser
    product: OrderProduct

    @property
    def first_name(self) -> str:
        return self.user.first_name
