"""Task ORM model. Workflow-created task assignable to a user."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import FirmScopedModel


class Task(FirmScopedModel, Base):
    """Task created by workflow (create_task action). Table: task."""

    __tablename__ = "task"

    case_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("legal_case.id", ondelete="CASCADE"), nullable=True, index=True
    )
    assigned_to_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending", server_default="pending"
    )
    priority: Mapped[str] = mapped_column(
        String(32), nullable=False, default="medium", server_default="medium"
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("ix_task_firm_case", "firm_id", "case_id"),)
