"""Chat messenger: routes a message to the provider of the firm's integration."""

from __future__ import annotations

import httpx

from caseflow.application.dtos.workflow import ChatIntegrationResult, DeliveryResult
from caseflow.core.config import Settings
from caseflow.infrastructure.external.chat.slack_client import SlackClient
from caseflow.infrastructure.external.chat.teams_client import (
    TeamsClient,
    build_text_card,
)
from caseflow.shared.enums import ChatProvider


class ChatMessenger:
    """IChatMessenger over Slack and Teams.

    Webhook wins when the integration has one; otherwise the token-based API
    is used if the route (Slack channel, Teams team+channel) is known.
    """

    def __init__(self, slack: SlackClient, teams: TeamsClient) -> None:
        self._slack = slack
        self._teams = teams

    async def send_chat_message(
        self,
        integration: ChatIntegrationResult,
        text: str,
        *,
        channel: str | None = None,
        team_id: str | None = None,
        channel_id: str | None = None,
    ) -> DeliveryResult | None:
        if integration.provider == ChatProvider.SLACK.value:
            return await self._send_slack(integration, text, channel)
        if integration.provider == ChatProvider.TEAMS.value:
            return await self._send_teams(integration, text, team_id, channel_id)
        return None

    async def _send_slack(
        self, integration: ChatIntegrationResult, text: str, channel: str | None
    ) -> DeliveryResult | None:
        if integration.webhook_url:
            return await self._slack.send_webhook(integration.webhook_url, text)
        target = channel or integration.default_channel
        if integration.access_token and target:
            return await self._slack.post_message(integration.access_token, target, text)
        return None

    async def _send_teams(
        self,
        integration: ChatIntegrationResult,
        text: str,
        team_id: str | None,
        channel_id: str | None,
    ) -> DeliveryResult | None:
        card = build_text_card(text)
        if integration.webhook_url:
            return await self._teams.send_webhook(integration.webhook_url, card)
        team_id = team_id or integration.settings.get("teamId")
        channel_id = channel_id or integration.settings.get("channelId")
        if integration.access_token and team_id and channel_id:
            return await self._teams.send_channel_card(
                integration.access_token, team_id, channel_id, card
            )
        return None


def create_chat_messenger(
    settings: Settings, *, http_client: httpx.AsyncClient | None = None
) -> ChatMessenger:
    timeout = settings.channel_timeout_seconds
    return ChatMessenger(
        SlackClient(
            api_url=settings.slack_api_url, http_client=http_client, timeout=timeout
        ),
        TeamsClient(
            graph_url=settings.graph_api_url, http_client=http_client, timeout=timeout
        ),
    )
