"""Persistence models: ORM entities and mixins."""

from caseflow.infrastructure.persistence.models.firm import Firm
from caseflow.infrastructure.persistence.models.integration import ChatIntegration
from caseflow.infrastructure.persistence.models.legal_case import (
    CaseTeamMember,
    LegalCase,
)
from caseflow.infrastructure.persistence.models.mixins import (
    AuditedFirmScopedModel,
    CuidMixin,
    FirmMixin,
    FirmScopedModel,
    SoftDeleteMixin,
    TimestampMixin,
    UserAuditMixin,
)
from caseflow.infrastructure.persistence.models.notification import Notification
from caseflow.infrastructure.persistence.models.task import Task
from caseflow.infrastructure.persistence.models.user import User
from caseflow.infrastructure.persistence.models.workflow import (
    ScheduledWorkflowStep,
    Workflow,
    WorkflowExecution,
)

__all__ = [
    "AuditedFirmScopedModel",
    "CaseTeamMember",
    "ChatIntegration",
    "CuidMixin",
    "Firm",
    "FirmMixin",
    "FirmScopedModel",
    "LegalCase",
    "Notification",
    "ScheduledWorkflowStep",
    "SoftDeleteMixin",
    "Task",
    "TimestampMixin",
    "User",
    "UserAuditMixin",
    "Workflow",
    "WorkflowExecution",
]
