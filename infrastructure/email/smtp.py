"""SMTP implementation of EmailProvider.

smtplib is blocking, so each send runs in a worker thread. A fresh connection
is opened per message; the review request fan-out is small and bounded by
EMAIL_MAX_CONCURRENCY.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage as MimeMessage
from email.utils import formataddr, make_msgid
from typing import Optional

from config import EmailSettings
from errors import DispatchError
from infrastructure.email.protocol import EmailAddress, EmailMessage, SendReceipt
from shared.logging import get_logger

log = get_logger(__name__)


def format_address(address: EmailAddress) -> str:
    return formataddr((address.name or "", address.address))


class SmtpEmailProvider:
    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    def _build(self, message: EmailMessage) -> MimeMessage:
        mime = MimeMessage()
        mime["From"] = format_address(message.sender)
        mime["To"] = format_address(message.to)
        mime["Subject"] = message.subject
        domain = message.sender.address.rpartition("@")[2] or None
        mime["Message-ID"] = make_msgid(domain=domain)
        mime.set_content(message.text)
        return mime

    def _deliver(self, mime: MimeMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(
            settings.smtp_host,
            settings.smtp_port,
            timeout=settings.email_timeout_seconds,
        ) as smtp:
            if settings.smtp_starttls:
                smtp.starttls()
            if settings.smtp_user:
                smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(mime)

    def _preview_url(self, message_id: str) -> Optional[str]:
        template = self._settings.smtp_preview_url_template
        if not template:
            return None
        return template.format(message_id=message_id.strip("<>"))

    async def send(self, message: EmailMessage) -> SendReceipt:
        if not self._settings.smtp_host:
            log.error("smtp_send_failed", reason="host_not_configured")
            raise DispatchError("SMTP host is not configured")

        mime = self._build(message)
        message_id = mime["Message-ID"]
        try:
            await asyncio.to_thread(self._deliver, mime)
        except (smtplib.SMTPException, OSError) as e:
            log.error(
                "smtp_send_failed",
                to_email=message.to.address,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DispatchError(f"SMTP delivery failed: {e}") from e

        log.info("email_sent_success", to_email=message.to.address, message_id=message_id)
        return SendReceipt(message_id=message_id, preview_url=self._preview_url(message_id))
