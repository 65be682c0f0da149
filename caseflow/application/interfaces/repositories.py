"""Repository interfaces (ports) for the workflow engine.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from caseflow.application.dtos.workflow import (
        ChatIntegrationResult,
        RecipientContact,
        ScheduledStepResult,
        TaskResult,
    )
    from caseflow.domain.entities.workflow import EventContext, WorkflowEntity
    from caseflow.shared.enums import RecipientType


class IWorkflowRepository(Protocol):
    """Read access to workflow definitions (the engine never mutates them)."""

    async def get_active_for_trigger(
        self, firm_id: str, trigger: str
    ) -> list[WorkflowEntity]:
        """Active, non-deleted workflows of the firm listening to `trigger`."""

    async def get_entity(self, workflow_id: str) -> WorkflowEntity | None:
        """Workflow with resolved steps, or None when missing or deleted."""


class IWorkflowExecutionRepository(Protocol):
    """Execution records: created running, finalized exactly once."""

    async def create_running(
        self, workflow: WorkflowEntity, trigger: str, context: EventContext
    ) -> str:
        """Insert a running execution record and return its id."""

    async def finalize(
        self,
        execution_id: str,
        status: str,
        *,
        execution_log: list[dict[str, Any]],
        steps_executed: int = 0,
        steps_failed: int = 0,
        steps_skipped: int = 0,
        steps_scheduled: int = 0,
        error_message: str | None = None,
    ) -> bool:
        """Move a running record to a terminal status. False when it was not running."""


class IScheduledStepRepository(Protocol):
    """Deferred step records (the sweep queue)."""

    async def create_pending(
        self,
        *,
        firm_id: str,
        workflow_id: str,
        step_id: str,
        event_data: dict[str, Any],
        execute_at: datetime,
        execution_id: str | None = None,
    ) -> ScheduledStepResult:
        """Insert a pending record."""

    async def list_due_ids(self, now: datetime, limit: int) -> list[str]:
        """Ids of pending records with execute_at <= now, oldest first."""

    async def claim(self, record_id: str, now: datetime) -> bool:
        """pending -> running via a conditional update. False when another worker won."""

    async def get_result(self, record_id: str) -> ScheduledStepResult | None:
        """Single record, or None."""

    async def mark_executed(self, record_id: str, now: datetime) -> bool:
        """running -> executed."""

    async def mark_failed(self, record_id: str, error: str, now: datetime) -> bool:
        """running -> failed with error."""

    async def expire_stale_claims(self, claimed_before: datetime, now: datetime) -> int:
        """Mark running records claimed before the cutoff as failed; return count."""


class IRecipientDirectory(Protocol):
    """Resolves recipient users and their contact data."""

    async def resolve(
        self,
        recipient_type: RecipientType,
        context: EventContext,
        *,
        user_id: str | None = None,
    ) -> list[RecipientContact]:
        """Users for the recipient type (empty list when nothing resolves)."""


class INotificationRepository(Protocol):
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
        """Insert one notification per user; return count."""


class ITaskRepository(Protocol):
    async def create(
        self,
        *,
        firm_id: str,
        case_id: str | None,
        title: str,
        description: str | None,
        priority: str,
        due_date: datetime | None,
        assigned_to_id: str | None,
        status: str = "pending",
    ) -> TaskResult:
        """Insert a task and return it."""


class ICaseRepository(Protocol):
    async def get_lead_attorney_id(self, case_id: str) -> str | None:
        """Lead attorney of the case, or None."""

    async def update_status(self, case_id: str, status: str) -> bool:
        """Set the case status. False when the case does not exist."""


class IEntityAssignmentRepository(Protocol):
    async def assign(self, table: str, entity_id: str, user_id: str) -> bool:
        """Set assigned_to_id on a row of a whitelisted table."""


class IIntegrationRepository(Protocol):
    async def get_enabled(
        self, firm_id: str, provider: str
    ) -> ChatIntegrationResult | None:
        """The firm's enabled integration for the provider, or None."""
