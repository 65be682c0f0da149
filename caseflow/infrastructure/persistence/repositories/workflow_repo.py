"""Workflow repository: definitions in, resolved WorkflowEntity out."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.domain.entities.workflow import WorkflowEntity
from caseflow.domain.exceptions import ValidationException
from caseflow.infrastructure.persistence.models.workflow import Workflow
from caseflow.infrastructure.persistence.repositories.base import BaseRepository
from caseflow.schemas.workflow import WorkflowCreate, parse_steps
from caseflow.shared.utils.datetime import utc_now


def to_entity(row: Workflow) -> WorkflowEntity:
    """Map Workflow ORM to WorkflowEntity, resolving step configs once."""
    return WorkflowEntity(
        id=row.id,
        firm_id=row.firm_id,
        name=row.name,
        trigger=row.trigger,
        is_active=row.is_active,
        case_type=row.case_type,
        description=row.description,
        steps=parse_steps(row.steps),
    )


class WorkflowRepository(BaseRepository[Workflow]):
    """Workflow repository. Implements IWorkflowRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Workflow)

    async def get_active_for_trigger(
        self, firm_id: str, trigger: str
    ) -> list[WorkflowEntity]:
        result = await self.db.execute(
            select(Workflow)
            .where(
                Workflow.firm_id == firm_id,
                Workflow.trigger == trigger,
                Workflow.is_active.is_(True),
                Workflow.deleted_at.is_(None),
            )
            .order_by(Workflow.created_at.asc(), Workflow.id.asc())
        )
        return [to_entity(row) for row in result.scalars().all()]

    async def get_entity(self, workflow_id: str) -> WorkflowEntity | None:
        result = await self.db.execute(
            select(Workflow).where(
                Workflow.id == workflow_id,
                Workflow.deleted_at.is_(None),
            )
        )
        row = result.scalar_one_or_none()
        return to_entity(row) if row else None

    async def create_workflow(
        self,
        firm_id: str,
        data: WorkflowCreate,
        *,
        created_by: str | None = None,
    ) -> WorkflowEntity:
        """Create a workflow; every step must resolve or ValidationException is raised."""
        broken = [s for s in parse_steps(data.steps) if s.error]
        if broken:
            raise ValidationException(
                f"Step {broken[0].id}: {broken[0].error}", field="steps"
            )
        workflow = Workflow(
            firm_id=firm_id,
            name=data.name,
            description=data.description,
            is_active=data.is_active,
            trigger=data.trigger.value,
            case_type=data.case_type,
            steps=data.steps,
            created_by=created_by,
        )
        return to_entity(await self.create(workflow))

    async def set_active(self, workflow_id: str, is_active: bool) -> bool:
        """Toggle a workflow; takes effect on the next trigger, never on a running one."""
        result = await self.db.execute(
            update(Workflow)
            .where(Workflow.id == workflow_id, Workflow.deleted_at.is_(None))
            .values(is_active=is_active, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
