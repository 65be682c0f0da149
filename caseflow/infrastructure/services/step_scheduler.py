"""Deferred steps: scheduling (StepScheduler) and the due sweep (DeferredStepSweeper).

The scheduled_workflow_step table is the queue. A sweep claims each due record
with a conditional pending -> running update, so concurrent sweeps never run
the same record twice; the loser of a claim race skips it silently. Failed
records are never retried. A database error abandons only the record it hit.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from caseflow.application.dtos.workflow import ScheduledStepResult, SweepResult
from caseflow.application.interfaces.repositories import IScheduledStepRepository
from caseflow.application.interfaces.services import IStepExecutor
from caseflow.domain.entities.workflow import (
    EventContext,
    WorkflowEntity,
    WorkflowStepEntity,
)
from caseflow.infrastructure.persistence.repositories.scheduled_step_repo import (
    ScheduledStepRepository,
)
from caseflow.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowRepository,
)
from caseflow.shared.telemetry.logging import get_logger
from caseflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class StepScheduler:
    """Persists a deferred step instead of executing it."""

    def __init__(self, scheduled_step_repo: IScheduledStepRepository) -> None:
        self._repo = scheduled_step_repo

    async def defer(
        self,
        workflow: WorkflowEntity,
        step: WorkflowStepEntity,
        context: EventContext,
        *,
        execution_id: str | None = None,
        now: datetime | None = None,
    ) -> ScheduledStepResult:
        """Create a pending record due at now + step.delay_minutes."""
        execute_at = (now or utc_now()) + timedelta(minutes=step.delay_minutes)
        record = await self._repo.create_pending(
            firm_id=workflow.firm_id,
            workflow_id=workflow.id,
            step_id=step.id,
            event_data=context.to_dict(),
            execute_at=execute_at,
            execution_id=execution_id,
        )
        logger.debug(
            "Deferred step %s of workflow %s until %s",
            step.id,
            workflow.id,
            execute_at.isoformat(),
        )
        return record


ExecutorFactory = Callable[[AsyncSession], IStepExecutor]


class DeferredStepSweeper:
    """Executes due deferred steps, each exactly once.

    Args:
        session_factory: One session per record keeps a failure in one record
            from touching another.
        executor_factory: Builds a step executor bound to a session.
        batch_size: Max records per sweep.
        stale_claim_after: Running records claimed longer ago than this are
            marked failed (their worker is presumed dead).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        executor_factory: ExecutorFactory,
        *,
        batch_size: int = 100,
        stale_claim_after: timedelta = timedelta(minutes=30),
    ) -> None:
        self._session_factory = session_factory
        self._executor_factory = executor_factory
        self._batch_size = batch_size
        self._stale_claim_after = stale_claim_after

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        now = now or utc_now()
        result = SweepResult()
        try:
            async with self._session_factory() as db:
                repo = ScheduledStepRepository(db)
                result.expired = await repo.expire_stale_claims(
                    now - self._stale_claim_after, now
                )
                due_ids = await repo.list_due_ids(now, self._batch_size)
                await db.commit()
        except SQLAlchemyError:
            logger.exception("Deferred step sweep could not list due records")
            return SweepResult()
        if result.expired:
            logger.warning("Expired %d stale deferred step claims", result.expired)
        result.due = len(due_ids)

        for record_id in due_ids:
            try:
                status = await self._run_record(record_id, now)
            except SQLAlchemyError:
                logger.exception(
                    "Deferred step %s abandoned on database error", record_id
                )
                result.errors += 1
                continue
            if status == "executed":
                result.executed += 1
            elif status == "failed":
                result.failed += 1
            else:
                result.skipped += 1

        if result.due:
            logger.info(
                "Deferred step sweep: due=%d executed=%d failed=%d skipped=%d errors=%d",
                result.due,
                result.executed,
                result.failed,
                result.skipped,
                result.errors,
            )
        return result

    async def _run_record(self, record_id: str, now: datetime) -> str:
        """Claim and execute one record. Returns executed, failed or skipped."""
        async with self._session_factory() as db:
            repo = ScheduledStepRepository(db)
            if not await repo.claim(record_id, now):
                await db.rollback()
                logger.debug("Deferred step %s already claimed; skipping", record_id)
                return "skipped"
            await db.commit()

            record = await repo.get_result(record_id)
            workflow = await WorkflowRepository(db).get_entity(record.workflow_id)
            step = workflow.find_step(record.step_id) if workflow else None
            error = self._unrunnable_reason(record, workflow, step)

            if error is None:
                try:
                    context = EventContext.from_dict(record.event_data)
                    await self._executor_factory(db).execute(step, context)
                    await repo.mark_executed(record_id, utc_now())
                    await db.commit()
                    return "executed"
                except Exception as e:
                    await db.rollback()
                    error = str(e) or e.__class__.__name__
                    logger.warning(
                        "Deferred step %s (workflow %s, step %s) failed: %s",
                        record_id,
                        record.workflow_id,
                        record.step_id,
                        error,
                    )

            await repo.mark_failed(record_id, error, utc_now())
            await db.commit()
            return "failed"

    @staticmethod
    def _unrunnable_reason(
        record: ScheduledStepResult,
        workflow: WorkflowEntity | None,
        step: WorkflowStepEntity | None,
    ) -> str | None:
        if workflow is None:
            return f"Workflow not found: {record.workflow_id}"
        if step is None:
            return f"Step {record.step_id} no longer exists in workflow {workflow.id}"
        return step.error
