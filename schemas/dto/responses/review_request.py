"""
Response DTOs for POST /review-request.

SendOutcome: one entry per fetched order, success or error
ReviewRequestResponse: {message, outcomes}
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

REVIEW_REQUESTS_SENT = "Review requests sent!"


class SendOutcome(BaseModel):
    """Result of dispatching one review request email.

    Serialized with ``exclude_none`` so success entries carry only
    ``messageId``/``previewUrl`` and failures only ``error``.
    """

    model_config = ConfigDict(populate_by_name=True)

    message_id: Optional[str] = Field(default=None, alias="messageId")
    preview_url: Optional[str] = Field(default=None, alias="previewUrl")
    error: Optional[str] = None

    @classmethod
    def sent(cls, message_id: str, preview_url: Optional[str] = None) -> "SendOutcome":
        return cls(message_id=message_id, preview_url=preview_url)

    @classmethod
    def failed(cls, error: str) -> "SendOutcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


class ReviewRequestResponse(BaseModel):
    message: str = REVIEW_REQUESTS_SENT
    outcomes: list[SendOutcome] = Field(default_factory=list)

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
