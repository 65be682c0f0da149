"""SendGrid v3 email sender."""

from __future__ import annotations

import httpx

from caseflow.application.dtos.workflow import DeliveryResult
from caseflow.infrastructure.external.http import (
    DEFAULT_TIMEOUT,
    HttpChannelClient,
    describe_http_error,
)
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SendGridEmailSender(HttpChannelClient):
    """Sends one email per call through the SendGrid mail/send endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        from_address: str,
        from_name: str,
        api_url: str = "https://api.sendgrid.com/v3/mail/send",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._api_key = api_key
        self._from_address = from_address
        self._from_name = from_name
        self._api_url = api_url

    def _payload(self, to: str, subject: str, html: str, text: str) -> dict:
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self._from_address, "name": self._from_name},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text or " "},
                {"type": "text/html", "value": html or text or " "},
            ],
        }

    async def send_email(
        self, to: str, subject: str, html: str, text: str
    ) -> DeliveryResult:
        """POST the message; 2xx is success, the X-Message-Id header is the message id."""
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    self._api_url,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    json=self._payload(to, subject, html, text),
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            error = describe_http_error(e)
            logger.warning("SendGrid send failed: %s", error)
            return DeliveryResult(success=False, error=error)
        return DeliveryResult(
            success=True, message_id=response.headers.get("X-Message-Id")
        )
