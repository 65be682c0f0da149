"""Chat integration repository (read-only for the engine)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.workflow import ChatIntegrationResult
from caseflow.infrastructure.persistence.models.integration import ChatIntegration


class IntegrationRepository:
    """Implements IIntegrationRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_enabled(
        self, firm_id: str, provider: str
    ) -> ChatIntegrationResult | None:
        result = await self.db.execute(
            select(ChatIntegration).where(
                ChatIntegration.firm_id == firm_id,
                ChatIntegration.provider == provider,
                ChatIntegration.is_enabled.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return ChatIntegrationResult(
            id=row.id,
            firm_id=row.firm_id,
            provider=row.provider,
            webhook_url=row.webhook_url,
            access_token=row.access_token,
            default_channel=row.default_channel,
            settings=dict(row.settings or {}),
        )
