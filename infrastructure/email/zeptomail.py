"""ZeptoMail implementation of EmailProvider.

Alternative to SMTP for deployments that send through the ZeptoMail HTTP API.
The API's ``request_id`` is reported as the message identifier.
"""

from __future__ import annotations

import httpx

from config import EmailSettings
from errors import DispatchError
from infrastructure.email.protocol import EmailMessage, SendReceipt
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"


class ZeptoMailProvider:
    def __init__(self, settings: EmailSettings, http_client: HttpClient) -> None:
        self._settings = settings
        self._http = http_client

    def _auth_header(self) -> str:
        token = self._settings.zepto_api_token
        if not token.startswith("Zoho-enczapikey "):
            token = f"Zoho-enczapikey {token}"
        return token

    async def send(self, message: EmailMessage) -> SendReceipt:
        if not self._settings.zepto_api_token:
            log.error("zepto_mail_send_failed", reason="token_not_configured")
            raise DispatchError("ZeptoMail API token is not configured")

        payload: dict = {
            "from": {
                "address": message.sender.address,
                "name": message.sender.name or message.sender.address,
            },
            "to": [
                {
                    "email_address": {
                        "address": message.to.address,
                        "name": message.to.name or message.to.address,
                    }
                }
            ],
            "subject": message.subject,
            "textbody": message.text,
        }
        headers = {
            "Authorization": self._auth_header(),
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.post(_ZEPTO_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            log.error(
                "email_send_error",
                to_email=message.to.address,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DispatchError(f"ZeptoMail request failed: {e}") from e

        if response.status_code not in (200, 201, 202):
            log.error(
                "email_sent_failed",
                to_email=message.to.address,
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise DispatchError(
                f"ZeptoMail rejected the message (status {response.status_code})"
            )

        try:
            body = response.json()
        except ValueError:
            body = None
        request_id = body.get("request_id") if isinstance(body, dict) else None
        if not request_id:
            raise DispatchError("ZeptoMail response has no request_id")

        log.info("email_sent_success", to_email=message.to.address, message_id=request_id)
        return SendReceipt(message_id=str(request_id))
