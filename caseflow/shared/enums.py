"""Shared enumerations for the workflow engine.

Trigger kinds, action kinds, condition operators, recipient types and the
lifecycle statuses of execution and deferred-step records.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class WorkflowTrigger(_ValuesMixin, str, Enum):
    """Domain event kinds that can start a workflow."""

    # Discovery
    DISCOVERY_REQUEST_CREATED = "discovery_request_created"
    DISCOVERY_REQUEST_SERVED = "discovery_request_served"
    DISCOVERY_RESPONSE_DUE = "discovery_response_due"
    DISCOVERY_RESPONSE_RECEIVED = "discovery_response_received"
    DISCOVERY_DEADLINE_APPROACHING = "discovery_deadline_approaching"
    # Documents
    DOCUMENT_UPLOADED = "document_uploaded"
    DOCUMENT_REVIEWED = "document_reviewed"
    DOCUMENT_FILED = "document_filed"
    # Cases
    CASE_CREATED = "case_created"
    CASE_STATUS_CHANGED = "case_status_changed"
    CASE_ASSIGNED = "case_assigned"
    # Deadlines
    DEADLINE_APPROACHING = "deadline_approaching"
    DEADLINE_TODAY = "deadline_today"
    DEADLINE_OVERDUE = "deadline_overdue"
    # Billing
    INVOICE_CREATED = "invoice_created"
    INVOICE_SENT = "invoice_sent"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_OVERDUE = "payment_overdue"
    # Tasks
    TASK_CREATED = "task_created"
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    TASK_OVERDUE = "task_overdue"


class WorkflowAction(_ValuesMixin, str, Enum):
    """Action kinds a workflow step can perform."""

    CREATE_NOTIFICATION = "create_notification"
    SEND_EMAIL = "send_email"
    SEND_SMS = "send_sms"
    SEND_CHAT_MESSAGE = "send_chat_message"
    SEND_SLACK_MESSAGE = "send_slack_message"
    SEND_TEAMS_MESSAGE = "send_teams_message"
    CREATE_TASK = "create_task"
    UPDATE_CASE_STATUS = "update_case_status"
    ASSIGN_TO_USER = "assign_to_user"


class ConditionOperator(_ValuesMixin, str, Enum):
    """Step condition operators."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class RecipientType(_ValuesMixin, str, Enum):
    """How an action resolves its recipients."""

    CASE_TEAM = "case_team"
    ASSIGNED_USER = "assigned_user"
    FIRM_ADMINS = "firm_admins"
    SPECIFIC_USER = "specific_user"


class ChatProvider(_ValuesMixin, str, Enum):
    """Chat integrations a firm can enable."""

    SLACK = "slack"
    TEAMS = "teams"


class WorkflowExecutionStatus(_ValuesMixin, str, Enum):
    """Workflow execution lifecycle status."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ScheduledStepStatus(_ValuesMixin, str, Enum):
    """Deferred step lifecycle: pending -> running (claimed) -> executed | failed."""

    PENDING = "pending"
    RUNNING = "running"
    EXECUTED = "executed"
    FAILED = "failed"


class StepOutcomeStatus(_ValuesMixin, str, Enum):
    """Per-step entry status in an execution log."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    SCHEDULED = "scheduled"
    FAILED = "failed"


class FirmRole(_ValuesMixin, str, Enum):
    """User roles within a firm (admins receive firm_admins notifications)."""

    OWNER = "owner"
    ADMIN = "admin"
    ATTORNEY = "attorney"
    PARALEGAL = "paralegal"
    STAFF = "staff"
