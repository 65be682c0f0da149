"""Workflow recipient resolver: maps a recipient type to firm users with contact data."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.workflow import RecipientContact
from caseflow.domain.entities.workflow import EventContext
from caseflow.infrastructure.persistence.models.legal_case import CaseTeamMember
from caseflow.infrastructure.persistence.models.user import User
from caseflow.shared.enums import FirmRole, RecipientType

_ADMIN_ROLES = (FirmRole.OWNER.value, FirmRole.ADMIN.value)


class WorkflowRecipientResolver:
    """Resolves recipients for notify/email/SMS steps (implements IRecipientDirectory).

    Only active users of the event's firm are returned, ordered by id so that
    sends happen in a stable order.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve(
        self,
        recipient_type: RecipientType,
        context: EventContext,
        *,
        user_id: str | None = None,
    ) -> list[RecipientContact]:
        stmt = select(User.id, User.email, User.phone).where(
            User.firm_id == context.firm_id,
            User.is_active.is_(True),
        )
        if recipient_type == RecipientType.CASE_TEAM:
            if not context.case_id:
                return []
            stmt = stmt.join(CaseTeamMember, CaseTeamMember.user_id == User.id).where(
                CaseTeamMember.case_id == context.case_id
            )
        elif recipient_type == RecipientType.ASSIGNED_USER:
            if not context.user_id:
                return []
            stmt = stmt.where(User.id == context.user_id)
        elif recipient_type == RecipientType.FIRM_ADMINS:
            stmt = stmt.where(User.role.in_(_ADMIN_ROLES))
        elif recipient_type == RecipientType.SPECIFIC_USER:
            if not user_id:
                return []
            stmt = stmt.where(User.id == user_id)
        else:
            return []

        result = await self.db.execute(stmt.distinct().order_by(User.id))
        return [
            RecipientContact(user_id=row.id, email=row.email, phone=row.phone)
            for row in result.all()
        ]
