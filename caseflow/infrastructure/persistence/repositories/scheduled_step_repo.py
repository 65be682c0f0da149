"""ScheduledWorkflowStep repository: the deferred-step queue.

Every state transition is a single conditional UPDATE keyed on the current
status; rowcount tells the caller whether it won. No row locks are taken.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.workflow import ScheduledStepResult
from caseflow.infrastructure.persistence.models.workflow import ScheduledWorkflowStep
from caseflow.infrastructure.persistence.repositories.base import BaseRepository
from caseflow.shared.enums import ScheduledStepStatus
from caseflow.shared.utils.datetime import ensure_utc


def _to_result(row: ScheduledWorkflowStep) -> ScheduledStepResult:
    """Map ORM row to ScheduledStepResult DTO."""
    return ScheduledStepResult(
        id=row.id,
        firm_id=row.firm_id,
        workflow_id=row.workflow_id,
        execution_id=row.execution_id,
        step_id=row.step_id,
        event_data=dict(row.event_data or {}),
        execute_at=ensure_utc(row.execute_at),
        status=row.status,
        claimed_at=ensure_utc(row.claimed_at),
        executed_at=ensure_utc(row.executed_at),
        error_message=row.error_message,
    )


class ScheduledStepRepository(BaseRepository[ScheduledWorkflowStep]):
    """Deferred step repository. Implements IScheduledStepRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ScheduledWorkflowStep)

    async def create_pending(
        self,
        *,
        firm_id: str,
        workflow_id: str,
        step_id: str,
        event_data: dict[str, Any],
        execute_at: datetime,
        execution_id: str | None = None,
    ) -> ScheduledStepResult:
        row = ScheduledWorkflowStep(
            firm_id=firm_id,
            workflow_id=workflow_id,
            execution_id=execution_id,
            step_id=step_id,
            event_data=event_data,
            execute_at=execute_at,
            status=ScheduledStepStatus.PENDING.value,
        )
        self.db.add(row)
        await self.db.flush()
        return _to_result(row)

    async def get_result(self, record_id: str) -> ScheduledStepResult | None:
        row = await self.get_by_id(record_id)
        return _to_result(row) if row else None

    async def list_due_ids(self, now: datetime, limit: int) -> list[str]:
        result = await self.db.execute(
            select(ScheduledWorkflowStep.id)
            .where(
                ScheduledWorkflowStep.status == ScheduledStepStatus.PENDING.value,
                ScheduledWorkflowStep.execute_at <= now,
            )
            .order_by(ScheduledWorkflowStep.execute_at.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def _transition(
        self, record_id: str, from_status: str, values: dict[str, Any]
    ) -> bool:
        result = await self.db.execute(
            update(ScheduledWorkflowStep)
            .where(
                ScheduledWorkflowStep.id == record_id,
                ScheduledWorkflowStep.status == from_status,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def claim(self, record_id: str, now: datetime) -> bool:
        return await self._transition(
            record_id,
            ScheduledStepStatus.PENDING.value,
            {"status": ScheduledStepStatus.RUNNING.value, "claimed_at": now},
        )

    async def mark_executed(self, record_id: str, now: datetime) -> bool:
        return await self._transition(
            record_id,
            ScheduledStepStatus.RUNNING.value,
            {"status": ScheduledStepStatus.EXECUTED.value, "executed_at": now},
        )

    async def mark_failed(self, record_id: str, error: str, now: datetime) -> bool:
        return await self._transition(
            record_id,
            ScheduledStepStatus.RUNNING.value,
            {
                "status": ScheduledStepStatus.FAILED.value,
                "executed_at": now,
                "error_message": error,
            },
        )

    async def expire_stale_claims(self, claimed_before: datetime, now: datetime) -> int:
        result = await self.db.execute(
            update(ScheduledWorkflowStep)
            .where(
                ScheduledWorkflowStep.status == ScheduledStepStatus.RUNNING.value,
                ScheduledWorkflowStep.claimed_at < claimed_before,
            )
            .values(
                status=ScheduledStepStatus.FAILED.value,
                executed_at=now,
                error_message="Claim expired before the step finished; not retried",
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
