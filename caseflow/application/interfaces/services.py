"""Service interfaces (ports) for outbound channels and step execution.

Channels report failures through DeliveryResult; they raise only for
programming errors. The engine bounds every call with its own timeout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from caseflow.application.dtos.workflow import (
        ChatIntegrationResult,
        DeliveryResult,
        StepOutcome,
    )
    from caseflow.domain.entities.workflow import EventContext, WorkflowStepEntity


class IMessageSender(Protocol):
    """Outbound email and SMS."""

    @property
    def sms_enabled(self) -> bool:
        """Whether SMS can be sent at all (credentials present)."""

    async def send_email(
        self, to: str, subject: str, html: str, text: str
    ) -> DeliveryResult:
        """Send one email."""

    async def send_sms(self, to: str, body: str) -> DeliveryResult:
        """Send one SMS."""


class IChatMessenger(Protocol):
    """Posts text to a chat integration (webhook or channel API)."""

    async def send_chat_message(
        self,
        integration: ChatIntegrationResult,
        text: str,
        *,
        channel: str | None = None,
        team_id: str | None = None,
        channel_id: str | None = None,
    ) -> DeliveryResult | None:
        """Post the message. None when the integration has no usable route."""


class IStepExecutor(Protocol):
    """Performs the side effect of one resolved step."""

    async def execute(
        self, step: WorkflowStepEntity, context: EventContext
    ) -> StepOutcome:
        """Run the step's action. Raises on configuration or channel failure."""
