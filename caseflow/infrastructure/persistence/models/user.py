"""User ORM model (firm-scoped). Source of recipient contact data."""

from sqlalchemy import Boolean, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import FirmScopedModel
from caseflow.shared.enums import FirmRole


class User(FirmScopedModel, Base):
    """User model. Table: app_user. Unique (firm_id, email)."""

    __tablename__ = "app_user"

    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    full_name: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(
        String(32), nullable=False, default=FirmRole.STAFF.value, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    __table_args__ = (UniqueConstraint("firm_id", "email", name="uq_firm_email"),)
