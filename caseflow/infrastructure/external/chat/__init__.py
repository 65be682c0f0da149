"""Chat channels (Slack, Microsoft Teams)."""

from caseflow.infrastructure.external.chat.messenger import (
    ChatMessenger,
    create_chat_messenger,
)
from caseflow.infrastructure.external.chat.slack_client import SlackClient
from caseflow.infrastructure.external.chat.teams_client import (
    TeamsClient,
    build_text_card,
)

__all__ = [
    "ChatMessenger",
    "SlackClient",
    "TeamsClient",
    "build_text_card",
    "create_chat_messenger",
]
