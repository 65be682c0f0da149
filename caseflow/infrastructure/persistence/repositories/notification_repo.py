"""Notification repository for workflow create_notification action."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.infrastructure.persistence.models.notification import Notification


class NotificationRepository:
    """Notification repository. Implements INotificationRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_many(
        self,
        *,
        firm_id: str,
        user_ids: list[str],
        notification_type: str,
        title: str,
        message: str,
        entity_type: str | None,
        entity_id: str | None,
        action_url: str | None,
    ) -> int:
        """Insert one notification per user (duplicates in user_ids collapse)."""
        rows = [
            Notification(
                firm_id=firm_id,
                user_id=user_id,
                type=notification_type,
                title=title,
                message=message,
                entity_type=entity_type,
                entity_id=entity_id,
                action_url=action_url,
            )
            for user_id in dict.fromkeys(user_ids)
        ]
        if not rows:
            return 0
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)
