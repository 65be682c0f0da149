"""DTOs for workflow bookkeeping and action side effects (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ScheduledStepResult:
    """Deferred step record."""

    id: str
    firm_id: str
    workflow_id: str
    execution_id: str | None
    step_id: str
    event_data: dict[str, Any]
    execute_at: datetime
    status: str
    claimed_at: datetime | None
    executed_at: datetime | None
    error_message: str | None


@dataclass(frozen=True)
class TaskResult:
    """Task created by the create_task action."""

    id: str
    firm_id: str
    case_id: str | None
    title: str
    description: str | None
    status: str
    priority: str
    due_date: datetime | None
    assigned_to_id: str | None


@dataclass(frozen=True)
class RecipientContact:
    """A user resolved as a recipient, with whatever contact data is on file."""

    user_id: str
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class ChatIntegrationResult:
    """Firm chat integration (only enabled rows are returned by the repository)."""

    id: str
    firm_id: str
    provider: str
    webhook_url: str | None
    access_token: str | None
    default_channel: str | None
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one channel send. Channels report failures here instead of raising."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass
class StepOutcome:
    """What an executed step did; becomes one execution-log entry."""

    status: str
    detail: dict[str, Any] = field(default_factory=dict)


@dataclass
class SweepResult:
    """Counters for one sweep tick."""

    due: int = 0
    executed: int = 0
    failed: int = 0
    skipped: int = 0
    expired: int = 0
    # Records abandoned on a database error; a later sweep retries or expires them.
    errors: int = 0
