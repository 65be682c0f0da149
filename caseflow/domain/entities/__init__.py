"""Domain entities: workflows, resolved steps, and the event context."""

from caseflow.domain.entities.workflow import (
    EventContext,
    WorkflowEntity,
    WorkflowStepEntity,
)

__all__ = ["EventContext", "WorkflowEntity", "WorkflowStepEntity"]
