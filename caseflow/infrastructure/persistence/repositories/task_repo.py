"""Task repository for workflow create_task action."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.workflow import TaskResult
from caseflow.infrastructure.persistence.models.task import Task
from caseflow.shared.utils.datetime import ensure_utc


def _to_result(t: Task) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        firm_id=t.firm_id,
        case_id=t.case_id,
        title=t.title,
        description=t.description,
        status=t.status,
        priority=t.priority,
        due_date=ensure_utc(t.due_date),
        assigned_to_id=t.assigned_to_id,
    )


class TaskRepository:
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(
        self,
        *,
        firm_id: str,
        case_id: str | None,
        title: str,
        description: str | None,
        priority: str,
        due_date: datetime | None,
        assigned_to_id: str | None,
        status: str = "pending",
    ) -> TaskResult:
        """Create a task and return the result DTO."""
        task = Task(
            firm_id=firm_id,
            case_id=case_id,
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            assigned_to_id=assigned_to_id,
            status=status,
        )
        self.db.add(task)
        await self.db.flush()
        return _to_result(task)
