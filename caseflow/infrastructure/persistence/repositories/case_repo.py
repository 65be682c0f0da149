"""Case repository and generic entity assignment for workflow mutation actions."""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.infrastructure.persistence.models.legal_case import LegalCase
from caseflow.shared.utils.datetime import utc_now


class CaseRepository:
    """Case reads and status updates. Implements ICaseRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_lead_attorney_id(self, case_id: str) -> str | None:
        result = await self.db.execute(
            select(LegalCase.lead_attorney_id).where(LegalCase.id == case_id)
        )
        return result.scalar_one_or_none()

    async def update_status(self, case_id: str, status: str) -> bool:
        result = await self.db.execute(
            update(LegalCase)
            .where(LegalCase.id == case_id)
            .values(status=status, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0


class EntityAssignmentRepository:
    """Sets assigned_to_id on a row of an arbitrary (caller-whitelisted) table.

    Implements IEntityAssignmentRepository. The table is addressed through a
    lightweight table() construct so no ORM model is required; the name is
    quoted by SQLAlchemy and must already be checked against the whitelist.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def assign(self, table: str, entity_id: str, user_id: str) -> bool:
        target = sa.table(
            table,
            sa.column("id"),
            sa.column("assigned_to_id"),
            sa.column("updated_at"),
        )
        result = await self.db.execute(
            sa.update(target)
            .where(target.c.id == entity_id)
            .values(assigned_to_id=user_id, updated_at=utc_now())
        )
        return result.rowcount > 0
