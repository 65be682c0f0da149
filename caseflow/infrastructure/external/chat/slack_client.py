"""Slack: incoming webhook or chat.postMessage with a bot token."""

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


class SlackClient(HttpChannelClient):
    """Posts plain-text messages to Slack."""

    def __init__(
        self,
        *,
        api_url: str = "https://slack.com/api",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._api_url = api_url.rstrip("/")

    async def send_webhook(self, webhook_url: str, text: str) -> DeliveryResult:
        """POST {text} to an incoming webhook; any 2xx is success."""
        try:
            async with self._http_cm() as client:
                response = await client.post(webhook_url, json={"text": text})
                response.raise_for_status()
        except httpx.HTTPError as e:
            error = describe_http_error(e)
            logger.warning("Slack webhook failed: %s", error)
            return DeliveryResult(success=False, error=error)
        return DeliveryResult(success=True)

    async def post_message(
        self, access_token: str, channel: str, text: str
    ) -> DeliveryResult:
        """Call chat.postMessage. Slack answers 200 with ok=false on API errors."""
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    f"{self._api_url}/chat.postMessage",
                    headers={"Authorization": f"Bearer {access_token}"},
                    json={
                        "channel": channel,
                        "text": text,
                        "unfurl_links": False,
                        "unfurl_media": True,
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            error = describe_http_error(e)
            logger.warning("Slack chat.postMessage failed: %s", error)
            return DeliveryResult(success=False, error=error)
        except ValueError as e:
            return DeliveryResult(success=False, error=f"invalid Slack response: {e}")
        if not data.get("ok"):
            return DeliveryResult(
                success=False, error=str(data.get("error") or "slack_api_error")
            )
        return DeliveryResult(success=True, message_id=data.get("ts"))
