"""Chat integration ORM model (Slack, Teams). Tokens are managed outside the engine."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import FirmScopedModel


class ChatIntegration(FirmScopedModel, Base):
    """Firm chat integration. Table: chat_integration. One row per (firm, provider)."""

    __tablename__ = "chat_integration"

    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    is_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    webhook_url: Mapped[str | None] = mapped_column(String, nullable=True)
    access_token: Mapped[str | None] = mapped_column(String, nullable=True)
    default_channel: Mapped[str | None] = mapped_column(String, nullable=True)
    settings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("firm_id", "provider", name="uq_chat_integration_provider"),
    )
