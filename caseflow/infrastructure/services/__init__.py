"""Engine services: dispatch, runner, step scheduling and action execution."""

from caseflow.infrastructure.services.default_workflows import (
    DEFAULT_WORKFLOWS,
    create_default_workflows,
)
from caseflow.infrastructure.services.step_scheduler import (
    DeferredStepSweeper,
    StepScheduler,
)
from caseflow.infrastructure.services.workflow_actions import WorkflowStepExecutor
from caseflow.infrastructure.services.workflow_engine import (
    WorkflowEngine,
    create_workflow_engine,
)
from caseflow.infrastructure.services.workflow_recipient_resolver import (
    WorkflowRecipientResolver,
)
from caseflow.infrastructure.services.workflow_runner import WorkflowRunner

__all__ = [
    "DEFAULT_WORKFLOWS",
    "DeferredStepSweeper",
    "StepScheduler",
    "WorkflowEngine",
    "WorkflowRecipientResolver",
    "WorkflowRunner",
    "WorkflowStepExecutor",
    "create_default_workflows",
    "create_workflow_engine",
]
