"""Workflow, WorkflowExecution and ScheduledWorkflowStep ORM models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import (
    AuditedFirmScopedModel,
    FirmScopedModel,
)
from caseflow.shared.enums import ScheduledStepStatus, WorkflowExecutionStatus


def _status_check(values: list[str], name: str) -> CheckConstraint:
    return CheckConstraint(
        "status IN ({})".format(
            ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
        ),
        name=name,
    )


class Workflow(AuditedFirmScopedModel, Base):
    """Workflow definition. Table: workflow. Trigger + ordered steps JSON."""

    __tablename__ = "workflow"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    trigger: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    case_type: Mapped[str | None] = mapped_column(String, nullable=True)
    steps: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("ix_workflow_firm_trigger_active", "firm_id", "trigger", "is_active"),
    )


class WorkflowExecution(FirmScopedModel, Base):
    """Workflow execution audit. Table: workflow_execution."""

    __tablename__ = "workflow_execution"

    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    trigger: Mapped[str] = mapped_column(String(64), nullable=False)
    trigger_event: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=WorkflowExecutionStatus.RUNNING.value,
        index=True,
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    steps_executed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    steps_failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    steps_skipped: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    steps_scheduled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    execution_log: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON, nullable=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_workflow_execution_firm_workflow", "firm_id", "workflow_id"),
        _status_check(
            WorkflowExecutionStatus.values(), "workflow_execution_status_check"
        ),
    )


class ScheduledWorkflowStep(FirmScopedModel, Base):
    """Deferred step record; the sweep queue. Table: scheduled_workflow_step."""

    __tablename__ = "scheduled_workflow_step"

    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    execution_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("workflow_execution.id", ondelete="SET NULL"),
        nullable=True,
    )
    step_id: Mapped[str] = mapped_column(String, nullable=False)
    event_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    execute_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ScheduledStepStatus.PENDING.value,
    )
    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    executed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_scheduled_workflow_step_due", "status", "execute_at"),
        _status_check(
            ScheduledStepStatus.values(), "scheduled_workflow_step_status_check"
        ),
    )
