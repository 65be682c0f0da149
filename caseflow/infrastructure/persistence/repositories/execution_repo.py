"""WorkflowExecution repository: running records and their single finalization."""

from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.domain.entities.workflow import EventContext, WorkflowEntity
from caseflow.infrastructure.persistence.models.workflow import WorkflowExecution
from caseflow.infrastructure.persistence.repositories.base import BaseRepository
from caseflow.shared.enums import WorkflowExecutionStatus
from caseflow.shared.utils.datetime import utc_now


class WorkflowExecutionRepository(BaseRepository[WorkflowExecution]):
    """Execution repository. Implements IWorkflowExecutionRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowExecution)

    async def create_running(
        self, workflow: WorkflowEntity, trigger: str, context: EventContext
    ) -> str:
        execution = WorkflowExecution(
            firm_id=workflow.firm_id,
            workflow_id=workflow.id,
            trigger=trigger,
            trigger_event=context.to_dict(),
            status=WorkflowExecutionStatus.RUNNING.value,
            started_at=utc_now(),
        )
        self.db.add(execution)
        await self.db.flush()
        return execution.id

    async def finalize(
        self,
        execution_id: str,
        status: str,
        *,
        execution_log: list[dict[str, Any]],
        steps_executed: int = 0,
        steps_failed: int = 0,
        steps_skipped: int = 0,
        steps_scheduled: int = 0,
        error_message: str | None = None,
    ) -> bool:
        """Conditional on status == running so a record is finalized at most once."""
        result = await self.db.execute(
            update(WorkflowExecution)
            .where(
                WorkflowExecution.id == execution_id,
                WorkflowExecution.status == WorkflowExecutionStatus.RUNNING.value,
            )
            .values(
                status=status,
                completed_at=utc_now(),
                execution_log=execution_log,
                steps_executed=steps_executed,
                steps_failed=steps_failed,
                steps_skipped=steps_skipped,
                steps_scheduled=steps_scheduled,
                error_message=error_message,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
