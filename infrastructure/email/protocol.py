"""EmailProvider protocol — services depend on this, not the concrete implementation."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class EmailAddress:
    address: str
    name: Optional[str] = None


@dataclass(frozen=True)
class EmailMessage:
    sender: EmailAddress
    to: EmailAddress
    subject: str
    text: str


@dataclass(frozen=True)
class SendReceipt:
    message_id: str
    preview_url: Optional[str] = None


class EmailProvider(Protocol):
    async def send(self, message: EmailMessage) -> SendReceipt:
        """Hand *message* to the transport.

        Raises:
            DispatchError: the transport rejected or could not take the message.
        """
        ...
