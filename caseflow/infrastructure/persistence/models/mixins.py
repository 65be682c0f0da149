"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, FirmMixin, TimestampMixin, SoftDeleteMixin and the
combined FirmScopedModel and AuditedFirmScopedModel.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from caseflow.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class FirmMixin:
    """Mixin for firm-scoped models. Provides firm_id FK to firm with CASCADE delete."""

    @declared_attr
    def firm_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("firm.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class SoftDeleteMixin:
    """Mixin for soft delete (deleted_at). Null means not deleted."""

    @declared_attr
    def deleted_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True, index=True)


class UserAuditMixin(TimestampMixin, SoftDeleteMixin):
    """Mixin for user audit: created_by, updated_by (FK to app_user.id)."""

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String,
            ForeignKey("app_user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )

    @declared_attr
    def updated_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
        )


class FirmScopedModel(CuidMixin, FirmMixin, TimestampMixin):
    """Combined mixin: CUID + firm_id + created_at/updated_at."""

    __abstract__ = True


class AuditedFirmScopedModel(CuidMixin, FirmMixin, UserAuditMixin):
    """Combined mixin: CUID + firm_id + user audit (timestamps, created_by, soft delete)."""

    __abstract__ = True
