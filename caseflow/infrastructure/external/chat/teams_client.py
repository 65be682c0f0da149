"""Microsoft Teams: incoming webhook or Graph channel message carrying an Adaptive Card."""

from __future__ import annotations

import json
from typing import Any

import httpx

from caseflow.application.dtos.workflow import DeliveryResult
from caseflow.infrastructure.external.http import (
    DEFAULT_TIMEOUT,
    HttpChannelClient,
    describe_http_error,
)
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"


def build_text_card(text: str) -> dict[str, Any]:
    """Adaptive Card (v1.4) with a single wrapping TextBlock."""
    return {
        "type": "AdaptiveCard",
        "version": "1.4",
        "body": [{"type": "TextBlock", "text": text, "wrap": True}],
    }


class TeamsClient(HttpChannelClient):
    """Posts Adaptive Cards to Teams channels."""

    def __init__(
        self,
        *,
        graph_url: str = "https://graph.microsoft.com/v1.0",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._graph_url = graph_url.rstrip("/")

    async def send_webhook(
        self, webhook_url: str, card: dict[str, Any]
    ) -> DeliveryResult:
        payload = {
            "type": "message",
            "attachments": [
                {"contentType": ADAPTIVE_CARD_CONTENT_TYPE, "content": card}
            ],
        }
        try:
            async with self._http_cm() as client:
                response = await client.post(webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            error = describe_http_error(e)
            logger.warning("Teams webhook failed: %s", error)
            return DeliveryResult(success=False, error=error)
        return DeliveryResult(success=True)

    async def send_channel_card(
        self,
        access_token: str,
        team_id: str,
        channel_id: str,
        card: dict[str, Any],
    ) -> DeliveryResult:
        """Graph POST /teams/{team}/channels/{channel}/messages with the card attached."""
        payload = {
            "body": {
                "contentType": "html",
                "content": '<attachment id="card"></attachment>',
            },
            "attachments": [
                {
                    "id": "card",
                    "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
                    "content": json.dumps(card),
                }
            ],
        }
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    f"{self._graph_url}/teams/{team_id}/channels/{channel_id}/messages",
                    headers={"Authorization": f"Bearer {access_token}"},
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            error = describe_http_error(e)
            logger.warning("Teams channel message failed: %s", error)
            return DeliveryResult(success=False, error=error)
        except ValueError as e:
            return DeliveryResult(success=False, error=f"invalid Graph response: {e}")
        return DeliveryResult(success=True, message_id=data.get("id"))
