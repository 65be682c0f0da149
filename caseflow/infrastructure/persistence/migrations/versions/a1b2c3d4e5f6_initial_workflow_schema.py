"""initial workflow schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19

Firm, users, cases and case teams (read by recipient resolution), the tables
workflow actions write (notification, task), chat integrations, and the
engine's own tables: workflow, workflow_execution, scheduled_workflow_step.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _firm_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["firm_id"], ["firm.id"], ondelete="CASCADE")


def upgrade() -> None:
    op.create_table(
        "firm",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.UniqueConstraint("firm_id", "email", name="uq_firm_email"),
    )
    op.create_index("ix_app_user_firm_id", "app_user", ["firm_id"], unique=False)
    op.create_index("ix_app_user_role", "app_user", ["role"], unique=False)

    op.create_table(
        "legal_case",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("case_number", sa.String(), nullable=True),
        sa.Column("case_type", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=64), nullable=False),
        sa.Column("lead_attorney_id", sa.String(), nullable=True),
        sa.Column("assigned_to_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.ForeignKeyConstraint(
            ["lead_attorney_id"], ["app_user.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(["assigned_to_id"], ["app_user.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_legal_case_firm_id", "legal_case", ["firm_id"], unique=False)
    op.create_index("ix_legal_case_case_type", "legal_case", ["case_type"], unique=False)

    op.create_table(
        "case_team_member",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("case_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("team_role", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["case_id"], ["legal_case.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("case_id", "user_id", name="uq_case_team_member"),
    )
    op.create_index(
        "ix_case_team_member_case_id", "case_team_member", ["case_id"], unique=False
    )
    op.create_index(
        "ix_case_team_member_user_id", "case_team_member", ["user_id"], unique=False
    )

    op.create_table(
        "notification",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=True),
        sa.Column("entity_id", sa.String(), nullable=True),
        sa.Column("action_url", sa.String(), nullable=True),
        sa.Column(
            "is_read", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notification_firm_id", "notification", ["firm_id"], unique=False)
    op.create_index(
        "ix_notification_user_read", "notification", ["user_id", "is_read"], unique=False
    )

    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("case_id", sa.String(), nullable=True),
        sa.Column("assigned_to_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status", sa.String(length=32), server_default="pending", nullable=False
        ),
        sa.Column(
            "priority", sa.String(length=32), server_default="medium", nullable=False
        ),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.ForeignKeyConstraint(["case_id"], ["legal_case.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["assigned_to_id"], ["app_user.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_task_firm_id", "task", ["firm_id"], unique=False)
    op.create_index("ix_task_case_id", "task", ["case_id"], unique=False)
    op.create_index("ix_task_assigned_to_id", "task", ["assigned_to_id"], unique=False)
    op.create_index("ix_task_firm_case", "task", ["firm_id", "case_id"], unique=False)

    op.create_table(
        "chat_integration",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("provider", sa.String(length=32), nullable=False),
        sa.Column(
            "is_enabled", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("webhook_url", sa.String(), nullable=True),
        sa.Column("access_token", sa.String(), nullable=True),
        sa.Column("default_channel", sa.String(), nullable=True),
        sa.Column("settings", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.UniqueConstraint("firm_id", "provider", name="uq_chat_integration_provider"),
    )
    op.create_index(
        "ix_chat_integration_firm_id", "chat_integration", ["firm_id"], unique=False
    )

    op.create_table(
        "workflow",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("trigger", sa.String(length=64), nullable=False),
        sa.Column("case_type", sa.String(), nullable=True),
        sa.Column("steps", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("updated_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.ForeignKeyConstraint(["created_by"], ["app_user.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["updated_by"], ["app_user.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_workflow_firm_id", "workflow", ["firm_id"], unique=False)
    op.create_index("ix_workflow_trigger", "workflow", ["trigger"], unique=False)
    op.create_index("ix_workflow_deleted_at", "workflow", ["deleted_at"], unique=False)
    op.create_index("ix_workflow_created_by", "workflow", ["created_by"], unique=False)
    op.create_index(
        "ix_workflow_firm_trigger_active",
        "workflow",
        ["firm_id", "trigger", "is_active"],
        unique=False,
    )

    op.create_table(
        "workflow_execution",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("trigger", sa.String(length=64), nullable=False),
        sa.Column("trigger_event", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("steps_executed", sa.Integer(), nullable=False),
        sa.Column("steps_failed", sa.Integer(), nullable=False),
        sa.Column("steps_skipped", sa.Integer(), nullable=False),
        sa.Column("steps_scheduled", sa.Integer(), nullable=False),
        sa.Column("execution_log", sa.JSON(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.ForeignKeyConstraint(["workflow_id"], ["workflow.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "status IN ('running', 'completed', 'failed')",
            name="workflow_execution_status_check",
        ),
    )
    op.create_index(
        "ix_workflow_execution_firm_id", "workflow_execution", ["firm_id"], unique=False
    )
    op.create_index(
        "ix_workflow_execution_workflow_id",
        "workflow_execution",
        ["workflow_id"],
        unique=False,
    )
    op.create_index(
        "ix_workflow_execution_status", "workflow_execution", ["status"], unique=False
    )
    op.create_index(
        "ix_workflow_execution_firm_workflow",
        "workflow_execution",
        ["firm_id", "workflow_id"],
        unique=False,
    )

    op.create_table(
        "scheduled_workflow_step",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("firm_id", sa.String(), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("execution_id", sa.String(), nullable=True),
        sa.Column("step_id", sa.String(), nullable=False),
        sa.Column("event_data", sa.JSON(), nullable=False),
        sa.Column("execute_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("executed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        _firm_fk(),
        sa.ForeignKeyConstraint(["workflow_id"], ["workflow.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["execution_id"], ["workflow_execution.id"], ondelete="SET NULL"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'running', 'executed', 'failed')",
            name="scheduled_workflow_step_status_check",
        ),
    )
    op.create_index(
        "ix_scheduled_workflow_step_firm_id",
        "scheduled_workflow_step",
        ["firm_id"],
        unique=False,
    )
    op.create_index(
        "ix_scheduled_workflow_step_workflow_id",
        "scheduled_workflow_step",
        ["workflow_id"],
        unique=False,
    )
    op.create_index(
        "ix_scheduled_workflow_step_due",
        "scheduled_workflow_step",
        ["status", "execute_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("scheduled_workflow_step")
    op.drop_table("workflow_execution")
    op.drop_table("workflow")
    op.drop_table("chat_integration")
    op.drop_table("task")
    op.drop_table("notification")
    op.drop_table("case_team_member")
    op.drop_table("legal_case")
    op.drop_table("app_user")
    op.drop_table("firm")
