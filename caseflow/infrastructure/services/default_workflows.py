"""Default workflows created for a new firm."""

from __future__ import annotations

from caseflow.domain.entities.workflow import WorkflowEntity
from caseflow.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowRepository,
)
from caseflow.schemas.workflow import WorkflowCreate
from caseflow.shared.enums import WorkflowTrigger
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WORKFLOWS: list[WorkflowCreate] = [
    WorkflowCreate(
        name="Discovery Deadline Reminder",
        description="Send reminders for upcoming discovery deadlines",
        trigger=WorkflowTrigger.DISCOVERY_DEADLINE_APPROACHING,
        steps=[
            {
                "id": "step-1",
                "order": 1,
                "action": "create_notification",
                "config": {
                    "recipientType": "assigned_user",
                    "title": "Discovery Deadline Approaching",
                    "message": (
                        "Discovery request '{{metadata.requestTitle}}' for "
                        "{{caseName}} is due on {{metadata.dueDate}}"
                    ),
                    "actionUrl": "/discovery/{{entityId}}",
                },
            },
            {
                "id": "step-2",
                "order": 2,
                "action": "send_email",
                "config": {
                    "recipientType": "assigned_user",
                    "subject": "Discovery Deadline: {{metadata.requestTitle}}",
                    "body": (
                        "<p>The discovery request <strong>{{metadata.requestTitle}}"
                        "</strong> for case <strong>{{caseName}}</strong> is due on "
                        "{{metadata.dueDate}}.</p><p>Please ensure all responses are "
                        "prepared and filed on time.</p>"
                    ),
                },
            },
        ],
    ),
    WorkflowCreate(
        name="Document Upload Notification",
        description="Notify case team when a new document is uploaded",
        trigger=WorkflowTrigger.DOCUMENT_UPLOADED,
        steps=[
            {
                "id": "step-1",
                "order": 1,
                "action": "create_notification",
                "config": {
                    "recipientType": "case_team",
                    "title": "New Document Uploaded",
                    "message": (
                        "{{metadata.uploadedBy}} uploaded "
                        "'{{metadata.documentName}}' to {{caseName}}"
                    ),
                    "actionUrl": "/documents/{{entityId}}",
                },
            },
        ],
    ),
    WorkflowCreate(
        name="Case Deadline Reminder",
        description="Send reminders for important case deadlines",
        trigger=WorkflowTrigger.DEADLINE_APPROACHING,
        steps=[
            {
                "id": "step-1",
                "order": 1,
                "action": "send_email",
                "config": {
                    "recipientType": "case_team",
                    "subject": "Deadline Reminder: {{metadata.eventTitle}}",
                    "body": (
                        "<p>This is a reminder that <strong>{{metadata.eventTitle}}"
                        "</strong> for case <strong>{{caseName}}</strong> is coming "
                        "up on {{metadata.eventDate}}.</p>"
                    ),
                },
            },
            {
                "id": "step-2",
                "order": 2,
                "action": "create_notification",
                "config": {
                    "recipientType": "case_team",
                    "title": "Deadline Approaching",
                    "message": (
                        "{{metadata.eventTitle}} for {{caseName}} is on "
                        "{{metadata.eventDate}}"
                    ),
                    "actionUrl": "/calendar",
                },
            },
        ],
    ),
]


async def create_default_workflows(
    workflow_repo: WorkflowRepository,
    firm_id: str,
    *,
    created_by: str | None = None,
) -> list[WorkflowEntity]:
    """Create the default workflows for a firm (caller commits)."""
    created = [
        await workflow_repo.create_workflow(firm_id, data, created_by=created_by)
        for data in DEFAULT_WORKFLOWS
    ]
    logger.info("Created %d default workflows for firm %s", len(created), firm_id)
    return created
