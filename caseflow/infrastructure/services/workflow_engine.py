"""Workflow engine: trigger dispatch and deferred step sweep.

trigger_workflow is fire-and-forget: it finds the firm's active workflows for
the trigger and runs each one concurrently in its own session. Nothing raised
inside a run reaches the caller; every outcome lives in the run's execution
record.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from caseflow.application.dtos.workflow import SweepResult
from caseflow.application.interfaces.services import IChatMessenger, IMessageSender
from caseflow.application.services.condition_evaluator import ConditionEvaluator
from caseflow.application.services.template_interpolator import TemplateInterpolator
from caseflow.core.config import Settings, get_settings
from caseflow.domain.entities.workflow import EventContext, WorkflowEntity
from caseflow.domain.exceptions import ValidationException
from caseflow.infrastructure.external.chat.messenger import create_chat_messenger
from caseflow.infrastructure.external.messaging.sender import create_message_sender
from caseflow.infrastructure.persistence.database import get_session_factory
from caseflow.infrastructure.persistence.repositories import (
    CaseRepository,
    EntityAssignmentRepository,
    IntegrationRepository,
    NotificationRepository,
    ScheduledStepRepository,
    TaskRepository,
    WorkflowExecutionRepository,
    WorkflowRepository,
)
from caseflow.infrastructure.services.step_scheduler import (
    DeferredStepSweeper,
    StepScheduler,
)
from caseflow.infrastructure.services.workflow_actions import WorkflowStepExecutor
from caseflow.infrastructure.services.workflow_recipient_resolver import (
    WorkflowRecipientResolver,
)
from caseflow.infrastructure.services.workflow_runner import WorkflowRunner
from caseflow.shared.enums import WorkflowTrigger
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def normalize_trigger(trigger: WorkflowTrigger | str) -> str:
    """Trigger value for lookups; unknown trigger kinds raise ValidationException."""
    try:
        return WorkflowTrigger(trigger).value
    except ValueError:
        raise ValidationException(
            f"Unknown trigger kind: {trigger!r}", field="trigger"
        ) from None


class WorkflowEngine:
    """Entry point for the rest of the system (implements trigger dispatch and sweep).

    Args:
        session_factory: Source of sessions; each workflow run and each swept
            record gets its own.
        message_sender: Email/SMS channel.
        chat_messenger: Slack/Teams channel.
        settings: Timeouts, sweep sizing and the assignable-table whitelist.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        message_sender: IMessageSender,
        chat_messenger: IChatMessenger,
        settings: Settings | None = None,
        condition_evaluator: ConditionEvaluator | None = None,
        interpolator: TemplateInterpolator | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._message_sender = message_sender
        self._chat_messenger = chat_messenger
        self._settings = settings or get_settings()
        self._condition_evaluator = condition_evaluator or ConditionEvaluator()
        self._interpolator = interpolator or TemplateInterpolator()

    def build_step_executor(self, db: AsyncSession) -> WorkflowStepExecutor:
        """Step executor whose repositories share `db`."""
        return WorkflowStepExecutor(
            recipients=WorkflowRecipientResolver(db),
            notifications=NotificationRepository(db),
            tasks=TaskRepository(db),
            cases=CaseRepository(db),
            assignments=EntityAssignmentRepository(db),
            integrations=IntegrationRepository(db),
            message_sender=self._message_sender,
            chat_messenger=self._chat_messenger,
            settings=self._settings,
            interpolator=self._interpolator,
        )

    async def trigger_workflow(
        self, trigger: WorkflowTrigger | str, context: EventContext
    ) -> None:
        """Run every active workflow of the firm that matches the trigger and subtype."""
        trigger_value = normalize_trigger(trigger)
        try:
            async with self._session_factory() as db:
                candidates = await WorkflowRepository(db).get_active_for_trigger(
                    context.firm_id, trigger_value
                )
        except SQLAlchemyError:
            logger.exception(
                "Workflow lookup failed (firm_id=%s, trigger=%s)",
                context.firm_id,
                trigger_value,
            )
            return

        subtype = context.entity_subtype
        matching = [w for w in candidates if w.matches(trigger_value, subtype)]
        logger.info(
            "Trigger %s (firm_id=%s, entity=%s:%s): %d matching workflows",
            trigger_value,
            context.firm_id,
            context.entity_type,
            context.entity_id,
            len(matching),
        )
        if not matching:
            return
        await asyncio.gather(
            *(self._run_isolated(w, trigger_value, context) for w in matching)
        )

    async def _run_isolated(
        self, workflow: WorkflowEntity, trigger: str, context: EventContext
    ) -> None:
        try:
            async with self._session_factory() as db:
                execution_repo = WorkflowExecutionRepository(db)
                execution_id = await execution_repo.create_running(
                    workflow, trigger, context
                )
                await db.commit()
                runner = WorkflowRunner(
                    db,
                    execution_repo,
                    StepScheduler(ScheduledStepRepository(db)),
                    self.build_step_executor(db),
                    self._condition_evaluator,
                )
                status = await runner.run(workflow, context, execution_id)
            logger.info(
                "Workflow %s (%s) execution %s %s",
                workflow.id,
                workflow.name,
                execution_id,
                status,
            )
        except Exception:
            logger.exception(
                "Workflow %s run failed outside its execution record (firm_id=%s)",
                workflow.id,
                workflow.firm_id,
            )

    async def sweep_due_steps(self, now: datetime | None = None) -> SweepResult:
        """Execute deferred steps that are due (safe to run from several workers)."""
        sweeper = DeferredStepSweeper(
            self._session_factory,
            self.build_step_executor,
            batch_size=self._settings.sweep_batch_size,
            stale_claim_after=timedelta(
                minutes=self._settings.sweep_stale_claim_minutes
            ),
        )
        return await sweeper.sweep(now)


def create_workflow_engine(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> WorkflowEngine:
    """Engine wired from settings: process session factory and configured channels."""
    settings = settings or get_settings()
    return WorkflowEngine(
        get_session_factory(),
        message_sender=create_message_sender(settings, http_client=http_client),
        chat_messenger=create_chat_messenger(settings, http_client=http_client),
        settings=settings,
    )
