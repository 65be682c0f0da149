"""Case and case team ORM models (read by recipient resolution, status mutated by workflows)."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import (
    CuidMixin,
    FirmScopedModel,
    TimestampMixin,
)


class LegalCase(FirmScopedModel, Base):
    """Case. Table: legal_case."""

    __tablename__ = "legal_case"

    name: Mapped[str] = mapped_column(String, nullable=False)
    case_number: Mapped[str | None] = mapped_column(String, nullable=True)
    case_type: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(64), nullable=False, default="open")
    lead_attorney_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    assigned_to_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )


class CaseTeamMember(CuidMixin, TimestampMixin, Base):
    """User assigned to a case team. Table: case_team_member."""

    __tablename__ = "case_team_member"

    case_id: Mapped[str] = mapped_column(
        String, ForeignKey("legal_case.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    team_role: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("case_id", "user_id", name="uq_case_team_member"),
    )
