"""Log-only email sender used when no email provider is configured."""

from __future__ import annotations

import logging

from caseflow.application.dtos.workflow import DeliveryResult
from caseflow.shared.telemetry.logging import get_logger
from caseflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyEmailSender:
    """Logs instead of sending email.

    Use when SendGrid is not configured. Every call reports success so that
    local runs exercise the full step path.
    """

    async def send_email(
        self, to: str, subject: str, html: str, text: str
    ) -> DeliveryResult:
        subject_preview = (subject or "")[:80]
        logger.info("Workflow email: would send to %s (subject=%r)", to, subject_preview)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Workflow email body (first 500 chars, at %s): %s",
                utc_now().isoformat(),
                (text or html or "")[:500],
            )
        return DeliveryResult(success=True)
