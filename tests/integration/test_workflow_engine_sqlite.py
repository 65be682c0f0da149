"""WorkflowEngine end to end against SQLite: dispatch, deferral and the sweep."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError

from caseflow.domain.entities.workflow import EventContext
from caseflow.domain.exceptions import ValidationException
from caseflow.infrastructure.persistence.models import (
    Notification,
    ScheduledWorkflowStep,
    Task,
    Workflow,
    WorkflowExecution,
)
from caseflow.infrastructure.persistence.repositories import (
    ScheduledStepRepository,
    WorkflowRepository,
)
from caseflow.infrastructure.services import (
    WorkflowEngine,
    create_default_workflows,
)
from caseflow.schemas.workflow import WorkflowCreate
from caseflow.shared.enums import WorkflowTrigger
from caseflow.shared.utils.datetime import ensure_utc, utc_now

DEADLINE = WorkflowTrigger.DISCOVERY_DEADLINE_APPROACHING

NOTIFY_ASSIGNED = {
    "id": "notify",
    "order": 1,
    "action": "create_notification",
    "config": {
        "recipientType": "assigned_user",
        "title": "Due: {{metadata.requestTitle}}",
        "message": "{{caseName}}",
    },
}

EMAIL_TEAM_TOMORROW = {
    "id": "email",
    "order": 2,
    "action": "send_email",
    "delayMinutes": 1440,
    "config": {
        "recipientType": "case_team",
        "subject": "Reminder: {{metadata.requestTitle}}",
        "body": "<p>Due {{metadata.dueDate}}</p>",
    },
}


@pytest.fixture
def engine(session_factory, message_sender, chat_messenger, test_settings):
    return WorkflowEngine(
        session_factory,
        message_sender=message_sender,
        chat_messenger=chat_messenger,
        settings=test_settings,
    )


async def _create_workflow(session_factory, firm_id: str, **fields) -> str:
    fields.setdefault("name", "Test workflow")
    fields.setdefault("trigger", DEADLINE)
    async with session_factory() as db:
        workflow = await WorkflowRepository(db).create_workflow(
            firm_id, WorkflowCreate(**fields)
        )
        await db.commit()
    return workflow.id


async def _all(session_factory, model):
    async with session_factory() as db:
        result = await db.execute(select(model))
        return list(result.scalars().all())


async def _count(session_factory, model) -> int:
    async with session_factory() as db:
        return await db.scalar(select(func.count()).select_from(model))


async def test_no_matching_workflows_creates_no_executions(
    engine, session_factory, discovery_context
) -> None:
    await engine.trigger_workflow(DEADLINE, discovery_context)
    assert await _count(session_factory, WorkflowExecution) == 0


async def test_unknown_trigger_is_rejected(engine, discovery_context) -> None:
    with pytest.raises(ValidationException):
        await engine.trigger_workflow("court_adjourned", discovery_context)


async def test_immediate_step_and_deferred_email(
    engine, session_factory, seeded_firm, discovery_context, message_sender
) -> None:
    await _create_workflow(
        session_factory, seeded_firm.firm_id, steps=[NOTIFY_ASSIGNED, EMAIL_TEAM_TOMORROW]
    )

    before = utc_now()
    await engine.trigger_workflow(DEADLINE, discovery_context)

    notifications = await _all(session_factory, Notification)
    assert [n.user_id for n in notifications] == [seeded_firm.attorney_id]
    assert notifications[0].title == "Due: First Interrogatories"
    assert notifications[0].entity_id == "disc-1"
    assert message_sender.emails == []

    (record,) = await _all(session_factory, ScheduledWorkflowStep)
    assert record.status == "pending"
    assert record.step_id == "email"
    execute_at = ensure_utc(record.execute_at)
    expected = before + timedelta(minutes=1440)
    assert abs((execute_at - expected).total_seconds()) < 1

    (execution,) = await _all(session_factory, WorkflowExecution)
    assert execution.status == "completed"
    assert execution.steps_executed == 1
    assert execution.steps_scheduled == 1
    assert record.execution_id == execution.id

    not_yet = await engine.sweep_due_steps()
    assert not_yet.due == 0
    assert message_sender.emails == []

    swept = await engine.sweep_due_steps(now=execute_at + timedelta(seconds=1))
    assert (swept.due, swept.executed) == (1, 1)
    assert [e["to"] for e in message_sender.emails] == ["attorney@smith.test"]
    assert message_sender.emails[0]["subject"] == "Reminder: First Interrogatories"
    (record,) = await _all(session_factory, ScheduledWorkflowStep)
    assert record.status == "executed"
    assert record.executed_at is not None


async def test_concurrent_sweeps_execute_once(
    engine, session_factory, seeded_firm, discovery_context, message_sender
) -> None:
    await _create_workflow(
        session_factory, seeded_firm.firm_id, steps=[EMAIL_TEAM_TOMORROW]
    )
    await engine.trigger_workflow(DEADLINE, discovery_context)
    later = utc_now() + timedelta(days=2)

    results = await asyncio.gather(
        engine.sweep_due_steps(now=later), engine.sweep_due_steps(now=later)
    )

    assert sum(r.executed for r in results) == 1
    assert len(message_sender.emails) == 1
    (record,) = await _all(session_factory, ScheduledWorkflowStep)
    assert record.status == "executed"


async def test_inactive_and_filtered_workflows_do_not_run(
    engine, session_factory, seeded_firm, discovery_context
) -> None:
    await _create_workflow(
        session_factory,
        seeded_firm.firm_id,
        name="Inactive",
        is_active=False,
        steps=[NOTIFY_ASSIGNED],
    )
    await _create_workflow(
        session_factory,
        seeded_firm.firm_id,
        name="Family only",
        case_type="family",
        steps=[NOTIFY_ASSIGNED],
    )
    litigation_id = await _create_workflow(
        session_factory,
        seeded_firm.firm_id,
        name="Litigation only",
        case_type="litigation",
        steps=[NOTIFY_ASSIGNED],
    )

    await engine.trigger_workflow(DEADLINE, discovery_context)
    assert await _count(session_factory, WorkflowExecution) == 0

    litigation_event = EventContext(
        firm_id=discovery_context.firm_id,
        entity_id=discovery_context.entity_id,
        entity_type=discovery_context.entity_type,
        case_id=discovery_context.case_id,
        case_name=discovery_context.case_name,
        user_id=discovery_context.user_id,
        metadata={**discovery_context.metadata, "caseType": "litigation"},
    )
    await engine.trigger_workflow(DEADLINE, litigation_event)

    (execution,) = await _all(session_factory, WorkflowExecution)
    assert execution.workflow_id == litigation_id
    assert await _count(session_factory, Notification) == 1


async def test_channel_failure_still_completes(
    engine, session_factory, seeded_firm, discovery_context, message_sender
) -> None:
    message_sender.failing.add("attorney@smith.test")
    await _create_workflow(
        session_factory,
        seeded_firm.firm_id,
        steps=[
            {
                "id": "email",
                "order": 1,
                "action": "send_email",
                "config": {"recipientType": "assigned_user", "subject": "s", "body": "b"},
            },
            {
                "id": "task",
                "order": 2,
                "action": "create_task",
                "config": {"title": "Call {{caseName}} client", "assignTo": "case_lead"},
            },
        ],
    )

    await engine.trigger_workflow(DEADLINE, discovery_context)

    (execution,) = await _all(session_factory, WorkflowExecution)
    assert execution.status == "completed"
    assert execution.steps_failed == 1
    assert execution.steps_executed == 1
    assert execution.error_message is None
    (task,) = await _all(session_factory, Task)
    assert task.title == "Call Smith v. Jones client"
    assert task.assigned_to_id == seeded_firm.attorney_id


async def test_disallowed_assignment_fails_execution(
    engine, session_factory, seeded_firm, discovery_context
) -> None:
    await _create_workflow(
        session_factory,
        seeded_firm.firm_id,
        steps=[
            {
                "id": "assign",
                "order": 1,
                "action": "assign_to_user",
                "config": {"entityTable": "user", "userId": "{{userId}}"},
            },
            NOTIFY_ASSIGNED | {"order": 2},
        ],
    )

    await engine.trigger_workflow(DEADLINE, discovery_context)

    (execution,) = await _all(session_factory, WorkflowExecution)
    assert execution.status == "failed"
    assert execution.error_message.startswith("Step assign:")
    assert execution.completed_at is not None
    assert await _count(session_factory, Notification) == 1


async def test_default_workflows_run_for_new_firm(
    engine, session_factory, seeded_firm, discovery_context, message_sender
) -> None:
    async with session_factory() as db:
        created = await create_default_workflows(
            WorkflowRepository(db), seeded_firm.firm_id
        )
        await db.commit()
    assert [w.name for w in created] == [
        "Discovery Deadline Reminder",
        "Document Upload Notification",
        "Case Deadline Reminder",
    ]

    await engine.trigger_workflow(DEADLINE, discovery_context)

    (notification,) = await _all(session_factory, Notification)
    assert notification.message == (
        "Discovery request 'First Interrogatories' for Smith v. Jones is due on 2026-11-02"
    )
    assert notification.action_url == "/discovery/disc-1"
    assert [e["subject"] for e in message_sender.emails] == [
        "Discovery Deadline: First Interrogatories"
    ]


async def test_stale_claims_are_expired_not_retried(
    engine, session_factory, seeded_firm, message_sender
) -> None:
    workflow_id = await _create_workflow(
        session_factory, seeded_firm.firm_id, steps=[EMAIL_TEAM_TOMORROW]
    )
    now = utc_now()
    async with session_factory() as db:
        db.add(
            ScheduledWorkflowStep(
                firm_id=seeded_firm.firm_id,
                workflow_id=workflow_id,
                step_id="email",
                event_data={"firmId": seeded_firm.firm_id, "entityId": "x", "entityType": "task"},
                execute_at=now - timedelta(hours=3),
                status="running",
                claimed_at=now - timedelta(hours=2),
            )
        )
        await db.commit()

    result = await engine.sweep_due_steps(now=now)

    assert result.expired == 1
    assert result.due == 0
    (record,) = await _all(session_factory, ScheduledWorkflowStep)
    assert record.status == "failed"
    assert "not retried" in record.error_message
    assert message_sender.emails == []


async def test_deferred_step_removed_from_workflow_fails(
    engine, session_factory, seeded_firm
) -> None:
    workflow_id = await _create_workflow(
        session_factory, seeded_firm.firm_id, steps=[NOTIFY_ASSIGNED]
    )
    now = utc_now()
    async with session_factory() as db:
        db.add(
            ScheduledWorkflowStep(
                firm_id=seeded_firm.firm_id,
                workflow_id=workflow_id,
                step_id="gone",
                event_data={"firmId": seeded_firm.firm_id, "entityId": "x", "entityType": "task"},
                execute_at=now - timedelta(minutes=1),
                status="pending",
            )
        )
        await db.commit()

    result = await engine.sweep_due_steps(now=now)

    assert (result.due, result.failed) == (1, 1)
    (record,) = await _all(session_factory, ScheduledWorkflowStep)
    assert record.status == "failed"
    assert "no longer exists" in record.error_message


async def test_malformed_stored_steps_do_not_block_other_workflows(
    engine, session_factory, seeded_firm, discovery_context
) -> None:
    good_id = await _create_workflow(
        session_factory, seeded_firm.firm_id, name="Good", steps=[NOTIFY_ASSIGNED]
    )
    broken_id = await _create_workflow(
        session_factory, seeded_firm.firm_id, name="Broken", steps=[NOTIFY_ASSIGNED]
    )
    async with session_factory() as db:
        await db.execute(
            update(Workflow).where(Workflow.id == broken_id).values(steps=[None])
        )
        await db.commit()

    await engine.trigger_workflow(DEADLINE, discovery_context)

    assert await _count(session_factory, Notification) == 1
    executions = {e.workflow_id: e for e in await _all(session_factory, WorkflowExecution)}
    assert executions[good_id].status == "completed"
    assert executions[broken_id].status == "failed"
    assert executions[broken_id].error_message == (
        "Step step-1: Invalid step definition: expected an object, got NoneType"
    )


async def test_missing_assignable_table_fails_step_and_later_steps_run(
    engine, session_factory, seeded_firm, discovery_context
) -> None:
    # discovery_request is assignable by default but owned by the host schema.
    await _create_workflow(
        session_factory,
        seeded_firm.firm_id,
        steps=[
            {
                "id": "assign",
                "order": 1,
                "action": "assign_to_user",
                "config": {"entityTable": "discovery_request", "userId": "{{userId}}"},
            },
            NOTIFY_ASSIGNED | {"order": 2},
        ],
    )

    await engine.trigger_workflow(DEADLINE, discovery_context)

    assert await _count(session_factory, Notification) == 1
    (execution,) = await _all(session_factory, WorkflowExecution)
    assert execution.status == "failed"
    assert execution.error_message.startswith("Step assign: Database error:")
    assert "discovery_request" in execution.error_message
    assert [e["status"] for e in execution.execution_log] == ["failed", "success"]
    assert (execution.steps_failed, execution.steps_executed) == (1, 1)


async def test_database_error_on_one_record_does_not_stop_the_sweep(
    engine, session_factory, seeded_firm, discovery_context, monkeypatch
) -> None:
    workflow_id = await _create_workflow(
        session_factory, seeded_firm.firm_id, steps=[NOTIFY_ASSIGNED]
    )
    now = utc_now()
    async with session_factory() as db:
        for step_id, minutes_ago in (("gone", 10), ("notify", 5)):
            db.add(
                ScheduledWorkflowStep(
                    firm_id=seeded_firm.firm_id,
                    workflow_id=workflow_id,
                    step_id=step_id,
                    event_data=discovery_context.to_dict(),
                    execute_at=now - timedelta(minutes=minutes_ago),
                    status="pending",
                )
            )
        await db.commit()

    async def _mark_failed_unavailable(self, *args, **kwargs):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    monkeypatch.setattr(ScheduledStepRepository, "mark_failed", _mark_failed_unavailable)

    result = await engine.sweep_due_steps(now=now)

    assert (result.due, result.executed, result.errors) == (2, 1, 1)
    assert await _count(session_factory, Notification) == 1
    statuses = {r.step_id: r.status for r in await _all(session_factory, ScheduledWorkflowStep)}
    assert statuses == {"gone": "running", "notify": "executed"}
