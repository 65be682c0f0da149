"""Composite message sender (email + optional SMS) and its factory."""

from __future__ import annotations

from typing import Protocol

import httpx

from caseflow.application.dtos.workflow import DeliveryResult
from caseflow.core.config import Settings
from caseflow.infrastructure.external.messaging.log_only_sender import (
    LogOnlyEmailSender,
)
from caseflow.infrastructure.external.messaging.sendgrid_sender import (
    SendGridEmailSender,
)
from caseflow.infrastructure.external.messaging.twilio_sender import TwilioSmsSender
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class IEmailChannel(Protocol):
    async def send_email(
        self, to: str, subject: str, html: str, text: str
    ) -> DeliveryResult: ...


class ISmsChannel(Protocol):
    async def send_sms(self, to: str, body: str) -> DeliveryResult: ...


class MessageSender:
    """IMessageSender built from one email channel and an optional SMS channel."""

    def __init__(
        self, email_channel: IEmailChannel, sms_channel: ISmsChannel | None = None
    ) -> None:
        self._email = email_channel
        self._sms = sms_channel

    @property
    def sms_enabled(self) -> bool:
        return self._sms is not None

    async def send_email(
        self, to: str, subject: str, html: str, text: str
    ) -> DeliveryResult:
        return await self._email.send_email(to, subject, html, text)

    async def send_sms(self, to: str, body: str) -> DeliveryResult:
        if self._sms is None:
            return DeliveryResult(success=False, error="SMS service not configured")
        return await self._sms.send_sms(to, body)


def create_message_sender(
    settings: Settings, *, http_client: httpx.AsyncClient | None = None
) -> MessageSender:
    """Build the sender from settings: SendGrid or log-only email, Twilio SMS when configured."""
    timeout = settings.channel_timeout_seconds
    email_channel: IEmailChannel
    if settings.email_configured:
        email_channel = SendGridEmailSender(
            settings.sendgrid_api_key.get_secret_value(),
            from_address=settings.email_from_address,
            from_name=settings.email_from_name,
            api_url=settings.sendgrid_api_url,
            http_client=http_client,
            timeout=timeout,
        )
    else:
        logger.info("SendGrid not configured; workflow emails are logged only")
        email_channel = LogOnlyEmailSender()

    sms_channel: ISmsChannel | None = None
    if settings.sms_configured:
        sms_channel = TwilioSmsSender(
            settings.twilio_account_sid,
            settings.twilio_auth_token.get_secret_value(),
            settings.twilio_phone_number,
            api_url=settings.twilio_api_url,
            http_client=http_client,
            timeout=timeout,
        )
    return MessageSender(email_channel, sms_channel)
