"""Twilio REST SMS sender."""

from __future__ import annotations

import re

import httpx

from caseflow.application.dtos.workflow import DeliveryResult
from caseflow.infrastructure.external.http import (
    DEFAULT_TIMEOUT,
    HttpChannelClient,
    describe_http_error,
)
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_NON_DIGITS = re.compile(r"\D")


def format_phone_number(phone: str) -> str:
    """Normalise a phone number to E.164, assuming North America when no country code.

    10 digits get +1; 11 digits starting with 1 get +; an existing + prefix
    is kept as given.
    """
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    if phone.startswith("+"):
        return phone
    return f"+1{digits}"


class TwilioSmsSender(HttpChannelClient):
    """Sends SMS through the Twilio Messages resource (form-encoded, basic auth)."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        api_url: str = "https://api.twilio.com/2010-04-01",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._api_url = api_url.rstrip("/")

    @property
    def messages_url(self) -> str:
        return f"{self._api_url}/Accounts/{self._account_sid}/Messages.json"

    async def send_sms(self, to: str, body: str) -> DeliveryResult:
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    self.messages_url,
                    auth=(self._account_sid, self._auth_token),
                    data={
                        "To": format_phone_number(to),
                        "From": self._from_number,
                        "Body": body,
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            error = describe_http_error(e)
            logger.warning("Twilio send failed: %s", error)
            return DeliveryResult(success=False, error=error)
        except ValueError as e:
            return DeliveryResult(success=False, error=f"invalid Twilio response: {e}")
        return DeliveryResult(success=True, message_id=data.get("sid"))
