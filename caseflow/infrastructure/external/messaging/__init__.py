"""Outbound email and SMS channels."""

from caseflow.infrastructure.external.messaging.log_only_sender import (
    LogOnlyEmailSender,
)
from caseflow.infrastructure.external.messaging.sendgrid_sender import (
    SendGridEmailSender,
)
from caseflow.infrastructure.external.messaging.sender import (
    MessageSender,
    create_message_sender,
)
from caseflow.infrastructure.external.messaging.twilio_sender import (
    TwilioSmsSender,
    format_phone_number,
)

__all__ = [
    "LogOnlyEmailSender",
    "MessageSender",
    "SendGridEmailSender",
    "TwilioSmsSender",
    "create_message_sender",
    "format_phone_number",
]
