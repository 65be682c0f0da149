"""Repositories: one per aggregate the engine reads or writes."""

from caseflow.infrastructure.persistence.repositories.case_repo import (
    CaseRepository,
    EntityAssignmentRepository,
)
from caseflow.infrastructure.persistence.repositories.execution_repo import (
    WorkflowExecutionRepository,
)
from caseflow.infrastructure.persistence.repositories.integration_repo import (
    IntegrationRepository,
)
from caseflow.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from caseflow.infrastructure.persistence.repositories.scheduled_step_repo import (
    ScheduledStepRepository,
)
from caseflow.infrastructure.persistence.repositories.task_repo import TaskRepository
from caseflow.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowRepository,
)

__all__ = [
    "CaseRepository",
    "EntityAssignmentRepository",
    "IntegrationRepository",
    "NotificationRepository",
    "ScheduledStepRepository",
    "TaskRepository",
    "WorkflowExecutionRepository",
    "WorkflowRepository",
]
