"""Firm ORM model. Owner of workflows, users and cases."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Firm(CuidMixin, TimestampMixin, Base):
    """Firm. Table: firm."""

    __tablename__ = "firm"

    name: Mapped[str] = mapped_column(String, nullable=False)
