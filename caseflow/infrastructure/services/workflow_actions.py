"""Workflow step executor: one handler per action kind.

Each handler performs exactly one side effect for a resolved step. Handlers
raise WorkflowConfigurationException for problems in the workflow definition
and ChannelDeliveryException when an external send fails; the caller decides
how each is recorded.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, TypeVar

from caseflow.application.dtos.workflow import DeliveryResult, StepOutcome
from caseflow.application.interfaces.repositories import (
    ICaseRepository,
    IEntityAssignmentRepository,
    IIntegrationRepository,
    INotificationRepository,
    IRecipientDirectory,
    ITaskRepository,
)
from caseflow.application.interfaces.services import IChatMessenger, IMessageSender
from caseflow.application.services.template_interpolator import TemplateInterpolator
from caseflow.core.config import Settings
from caseflow.domain.entities.workflow import EventContext, WorkflowStepEntity
from caseflow.domain.exceptions import (
    ChannelDeliveryException,
    ChannelTimeoutException,
    WorkflowConfigurationException,
)
from caseflow.schemas.workflow import (
    AssignToUserConfig,
    CreateTaskConfig,
    NotifyUserConfig,
    SendChatMessageConfig,
    SendEmailConfig,
    SendSmsConfig,
    SlackMessageConfig,
    TeamsMessageConfig,
    UpdateCaseStatusConfig,
)
from caseflow.shared.enums import StepOutcomeStatus
from caseflow.shared.telemetry.logging import get_logger
from caseflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)

T = TypeVar("T")

_HTML_TAG = re.compile(r"<[^>]*>")


def html_to_text(html: str) -> str:
    """Plain-text email body: the HTML with tags removed."""
    return _HTML_TAG.sub("", html)


def _success(**detail: Any) -> StepOutcome:
    return StepOutcome(StepOutcomeStatus.SUCCESS.value, detail)


def _skipped(reason: str) -> StepOutcome:
    return StepOutcome(StepOutcomeStatus.SKIPPED.value, {"reason": reason})


class WorkflowStepExecutor:
    """Executes resolved steps (implements IStepExecutor).

    Built per database session; every collaborator is injected.
    """

    def __init__(
        self,
        *,
        recipients: IRecipientDirectory,
        notifications: INotificationRepository,
        tasks: ITaskRepository,
        cases: ICaseRepository,
        assignments: IEntityAssignmentRepository,
        integrations: IIntegrationRepository,
        message_sender: IMessageSender,
        chat_messenger: IChatMessenger,
        settings: Settings,
        interpolator: TemplateInterpolator | None = None,
    ) -> None:
        self._recipients = recipients
        self._notifications = notifications
        self._tasks = tasks
        self._cases = cases
        self._assignments = assignments
        self._integrations = integrations
        self._sender = message_sender
        self._chat = chat_messenger
        self._settings = settings
        self._interpolator = interpolator or TemplateInterpolator()

    async def execute(
        self, step: WorkflowStepEntity, context: EventContext
    ) -> StepOutcome:
        config = step.config
        if config is None:
            raise WorkflowConfigurationException(
                step.error or f"Step {step.id} has no resolved config", step_id=step.id
            )
        if isinstance(config, NotifyUserConfig):
            return await self._notify(config, context)
        if isinstance(config, SendEmailConfig):
            return await self._send_email(config, context)
        if isinstance(config, SendSmsConfig):
            return await self._send_sms(config, context)
        if isinstance(
            config, (SendChatMessageConfig, SlackMessageConfig, TeamsMessageConfig)
        ):
            return await self._send_chat(config, context)
        if isinstance(config, CreateTaskConfig):
            return await self._create_task(config, context)
        if isinstance(config, UpdateCaseStatusConfig):
            return await self._update_case_status(config, context)
        if isinstance(config, AssignToUserConfig):
            return await self._assign_to_user(config, context)
        raise WorkflowConfigurationException(
            f"Unknown action kind: {step.action!r}", step_id=step.id
        )

    async def _bounded(self, channel: str, call: Awaitable[T]) -> T:
        """Await a channel call; exceeding channel_timeout_seconds is a channel failure."""
        timeout = self._settings.channel_timeout_seconds
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except TimeoutError as e:
            raise ChannelTimeoutException(channel, timeout) from e

    async def _deliver_each(
        self,
        channel: str,
        targets: list[str],
        send: Callable[[str], Awaitable[DeliveryResult]],
    ) -> StepOutcome:
        """Send to every target; one failing recipient does not stop the others.

        Raises ChannelDeliveryException only when no target was reached.
        """
        sent = 0
        errors: list[str] = []
        for target in targets:
            try:
                result: DeliveryResult = await self._bounded(channel, send(target))
            except ChannelDeliveryException as e:
                errors.append(e.message)
                logger.warning("Workflow %s to %s failed: %s", channel, target, e.message)
                continue
            if result.success:
                sent += 1
            else:
                errors.append(result.error or "unknown error")
                logger.warning(
                    "Workflow %s to %s failed: %s", channel, target, result.error
                )
        if sent == 0 and errors:
            raise ChannelDeliveryException(
                channel, f"all {len(errors)} sends failed; first error: {errors[0]}"
            )
        detail: dict[str, Any] = {"sent": sent}
        if errors:
            detail["failed"] = len(errors)
            detail["errors"] = errors
        return _success(**detail)

    async def _notify(
        self, config: NotifyUserConfig, context: EventContext
    ) -> StepOutcome:
        contacts = await self._recipients.resolve(
            config.recipient_type, context, user_id=config.user_id
        )
        if not contacts:
            logger.warning(
                "create_notification skipped: no recipients for %r (firm_id=%s)",
                config.recipient_type.value,
                context.firm_id,
            )
            return _skipped(f"no recipients found for '{config.recipient_type.value}'")
        count = await self._notifications.create_many(
            firm_id=context.firm_id,
            user_ids=[c.user_id for c in contacts],
            notification_type=config.notification_type,
            title=self._interpolator.interpolate(config.title, context),
            message=self._interpolator.interpolate(config.message, context),
            entity_type=context.entity_type,
            entity_id=context.entity_id,
            action_url=self._interpolator.interpolate_optional(
                config.action_url, context
            ),
        )
        return _success(recipients_count=count)

    async def _send_email(
        self, config: SendEmailConfig, context: EventContext
    ) -> StepOutcome:
        if config.recipient_type is not None:
            contacts = await self._recipients.resolve(
                config.recipient_type, context, user_id=config.user_id
            )
            addresses = [c.email for c in contacts if c.email]
            if len(addresses) < len(contacts):
                logger.debug(
                    "send_email: %d recipients have no email on file",
                    len(contacts) - len(addresses),
                )
        else:
            addresses = [self._interpolator.interpolate(config.email, context)]
        addresses = list(dict.fromkeys(addresses))
        if not addresses:
            logger.warning(
                "send_email skipped: no email recipients (firm_id=%s)", context.firm_id
            )
            return _skipped("no email recipients")

        subject = self._interpolator.interpolate(config.subject, context)
        html = self._interpolator.interpolate(config.body, context)
        text = html_to_text(html)
        return await self._deliver_each(
            "email",
            addresses,
            lambda to: self._sender.send_email(to, subject, html, text),
        )

    async def _send_sms(self, config: SendSmsConfig, context: EventContext) -> StepOutcome:
        if not self._sender.sms_enabled:
            logger.info("send_sms skipped: SMS not configured")
            return _skipped("SMS not configured")
        if config.recipient_type is not None:
            contacts = await self._recipients.resolve(
                config.recipient_type, context, user_id=config.user_id
            )
            numbers = [c.phone for c in contacts if c.phone]
        else:
            numbers = [self._interpolator.interpolate(config.phone, context)]
        numbers = list(dict.fromkeys(numbers))
        if not numbers:
            logger.warning(
                "send_sms skipped: no phone recipients (firm_id=%s)", context.firm_id
            )
            return _skipped("no phone recipients")

        body = self._interpolator.interpolate(config.message, context)
        return await self._deliver_each(
            "sms", numbers, lambda to: self._sender.send_sms(to, body)
        )

    async def _send_chat(
        self,
        config: SendChatMessageConfig | SlackMessageConfig | TeamsMessageConfig,
        context: EventContext,
    ) -> StepOutcome:
        provider = config.provider.value
        integration = await self._integrations.get_enabled(context.firm_id, provider)
        if integration is None:
            logger.warning(
                "Chat message skipped: no enabled %s integration (firm_id=%s)",
                provider,
                context.firm_id,
            )
            return _skipped(f"no enabled {provider} integration")

        text = self._interpolator.interpolate(config.message, context)
        result = await self._bounded(
            provider,
            self._chat.send_chat_message(
                integration,
                text,
                channel=config.channel,
                team_id=config.team_id,
                channel_id=config.channel_id,
            ),
        )
        if result is None:
            logger.warning(
                "Chat message skipped: %s integration %s has no webhook or usable channel",
                provider,
                integration.id,
            )
            return _skipped(f"{provider} integration has no usable route")
        if not result.success:
            raise ChannelDeliveryException(provider, result.error or "unknown error")
        return _success(provider=provider, message_id=result.message_id)

    async def _create_task(
        self, config: CreateTaskConfig, context: EventContext
    ) -> StepOutcome:
        assigned_to_id = self._interpolator.interpolate_optional(
            config.assigned_to_id, context
        )
        if config.assign_to == "case_lead" and context.case_id:
            assigned_to_id = await self._cases.get_lead_attorney_id(context.case_id)
        due_date = None
        if config.due_days is not None:
            due_date = utc_now() + timedelta(days=config.due_days)
        task = await self._tasks.create(
            firm_id=context.firm_id,
            case_id=context.case_id,
            title=self._interpolator.interpolate(config.title, context),
            description=self._interpolator.interpolate_optional(
                config.description, context
            ),
            priority=config.priority,
            due_date=due_date,
            assigned_to_id=assigned_to_id,
        )
        return _success(task_id=task.id)

    async def _update_case_status(
        self, config: UpdateCaseStatusConfig, context: EventContext
    ) -> StepOutcome:
        if not context.case_id:
            return _skipped("event has no case")
        new_status = self._interpolator.interpolate(config.new_status, context)
        if not await self._cases.update_status(context.case_id, new_status):
            logger.warning("update_case_status: case %s not found", context.case_id)
            return _skipped(f"case not found: {context.case_id}")
        return _success(case_id=context.case_id, status=new_status)

    async def _assign_to_user(
        self, config: AssignToUserConfig, context: EventContext
    ) -> StepOutcome:
        if config.entity_table not in self._settings.assignable_tables:
            raise WorkflowConfigurationException(
                f"Table {config.entity_table!r} is not assignable"
            )
        entity_id = (
            self._interpolator.interpolate(config.entity_id, context)
            if config.entity_id
            else context.entity_id
        )
        user_id = self._interpolator.interpolate(config.user_id, context)
        if not await self._assignments.assign(config.entity_table, entity_id, user_id):
            logger.warning(
                "assign_to_user: %s %s not found", config.entity_table, entity_id
            )
            return _skipped(f"{config.entity_table} not found: {entity_id}")
        return _success(
            entity_table=config.entity_table, entity_id=entity_id, user_id=user_id
        )
