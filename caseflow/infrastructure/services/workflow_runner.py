"""Workflow runner: executes one workflow activation step by step.

Steps run strictly in order. A false condition skips the step, a delay
defers it, anything else executes it now. Failure classes:

- configuration errors (unresolvable step, unknown operator): the step fails
  and the execution ends failed with the first such error;
- any other step exception, channel failures included: the step fails and the
  execution can still complete;
- SQL errors raised by a step (missing table, constraint): that step's
  writes are rolled back and it fails like a configuration error;
- lost database connection: the run stops and the execution is marked failed.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DBAPIError, DisconnectionError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.interfaces.repositories import IWorkflowExecutionRepository
from caseflow.application.interfaces.services import IStepExecutor
from caseflow.application.services.condition_evaluator import ConditionEvaluator
from caseflow.domain.entities.workflow import (
    EventContext,
    WorkflowEntity,
    WorkflowStepEntity,
)
from caseflow.domain.exceptions import WorkflowConfigurationException
from caseflow.infrastructure.services.step_scheduler import StepScheduler
from caseflow.shared.enums import StepOutcomeStatus, WorkflowExecutionStatus
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def is_connection_lost(exc: SQLAlchemyError) -> bool:
    """True when the error means the store is unreachable, not that one statement failed."""
    if isinstance(exc, DisconnectionError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


class _RunLog:
    """Execution log entries plus counters for one run."""

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []
        self.executed = 0
        self.failed = 0
        self.skipped = 0
        self.scheduled = 0
        self.first_engine_error: str | None = None

    def add(self, step: WorkflowStepEntity, status: str, **detail: Any) -> None:
        self.entries.append(
            {"step_id": step.id, "action": step.action, "status": status, **detail}
        )
        if status == StepOutcomeStatus.SUCCESS.value:
            self.executed += 1
        elif status == StepOutcomeStatus.SKIPPED.value:
            self.skipped += 1
        elif status == StepOutcomeStatus.SCHEDULED.value:
            self.scheduled += 1
        elif status == StepOutcomeStatus.FAILED.value:
            self.failed += 1

    def engine_error(self, step: WorkflowStepEntity, error: str) -> None:
        if self.first_engine_error is None:
            self.first_engine_error = f"Step {step.id}: {error}"
        self.add(step, StepOutcomeStatus.FAILED.value, error=error, engine_error=True)

    def counters(self) -> dict[str, int]:
        return {
            "steps_executed": self.executed,
            "steps_failed": self.failed,
            "steps_skipped": self.skipped,
            "steps_scheduled": self.scheduled,
        }


class WorkflowRunner:
    """Runs the steps of one workflow and finalizes its execution record.

    Each step's writes are committed before the next step runs, so later
    conditions and steps see earlier side effects.
    """

    def __init__(
        self,
        db: AsyncSession,
        execution_repo: IWorkflowExecutionRepository,
        step_scheduler: StepScheduler,
        step_executor: IStepExecutor,
        condition_evaluator: ConditionEvaluator | None = None,
    ) -> None:
        self.db = db
        self._executions = execution_repo
        self._scheduler = step_scheduler
        self._executor = step_executor
        self._conditions = condition_evaluator or ConditionEvaluator()

    async def run(
        self, workflow: WorkflowEntity, context: EventContext, execution_id: str
    ) -> str:
        """Process every step, then finalize. Returns the final execution status."""
        log = _RunLog()
        try:
            for step in workflow.ordered_steps():
                await self._run_step(workflow, step, context, execution_id, log)
        except SQLAlchemyError as e:
            logger.exception(
                "Workflow %s execution %s aborted (firm_id=%s)",
                workflow.id,
                execution_id,
                workflow.firm_id,
            )
            await self.db.rollback()
            return await self._finalize(
                execution_id, WorkflowExecutionStatus.FAILED.value, log, str(e)
            )

        if log.first_engine_error is None:
            status = WorkflowExecutionStatus.COMPLETED.value
        else:
            status = WorkflowExecutionStatus.FAILED.value
        return await self._finalize(execution_id, status, log, log.first_engine_error)

    async def _run_step(
        self,
        workflow: WorkflowEntity,
        step: WorkflowStepEntity,
        context: EventContext,
        execution_id: str,
        log: _RunLog,
    ) -> None:
        if step.error:
            logger.error(
                "Workflow %s step %s is misconfigured: %s", workflow.id, step.id, step.error
            )
            log.engine_error(step, step.error)
            return

        try:
            passed = self._conditions.evaluate(step.conditions, context)
        except WorkflowConfigurationException as e:
            log.engine_error(step, e.message)
            return
        if not passed:
            logger.debug("Workflow %s step %s: conditions not met", workflow.id, step.id)
            log.add(step, StepOutcomeStatus.SKIPPED.value, reason="conditions not met")
            return

        if step.is_deferred:
            try:
                record = await self._scheduler.defer(
                    workflow, step, context, execution_id=execution_id
                )
                await self.db.commit()
            except SQLAlchemyError as e:
                await self._step_sql_error(workflow, step, e, log)
                return
            log.add(
                step,
                StepOutcomeStatus.SCHEDULED.value,
                scheduled_step_id=record.id,
                execute_at=record.execute_at.isoformat(),
            )
            return

        try:
            outcome = await self._executor.execute(step, context)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._step_sql_error(workflow, step, e, log)
        except WorkflowConfigurationException as e:
            await self.db.rollback()
            logger.error(
                "Workflow %s step %s configuration error: %s", workflow.id, step.id, e.message
            )
            log.engine_error(step, e.message)
        except Exception as e:
            await self.db.rollback()
            logger.warning(
                "Workflow %s step %s failed: %s", workflow.id, step.id, e
            )
            log.add(step, StepOutcomeStatus.FAILED.value, error=str(e))
        else:
            log.add(step, outcome.status, **outcome.detail)

    async def _step_sql_error(
        self,
        workflow: WorkflowEntity,
        step: WorkflowStepEntity,
        exc: SQLAlchemyError,
        log: _RunLog,
    ) -> None:
        """Roll back the step's writes; re-raise only when the connection is gone.

        Earlier steps are already committed, so the rollback discards this
        step alone.
        """
        if is_connection_lost(exc):
            raise exc
        await self.db.rollback()
        error = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
        logger.error(
            "Workflow %s step %s database error: %s", workflow.id, step.id, error
        )
        log.engine_error(step, f"Database error: {error}")

    async def _finalize(
        self, execution_id: str, status: str, log: _RunLog, error: str | None
    ) -> str:
        await self._executions.finalize(
            execution_id,
            status,
            execution_log=log.entries,
            error_message=error,
            **log.counters(),
        )
        await self.db.commit()
        return status
