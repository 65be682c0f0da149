"""Workflow and deferred-step repositories against PostgreSQL.

Require DATABASE_URL with migrations applied; the session is rolled back
after each test.
"""

from datetime import timedelta

import pytest

from caseflow.domain.exceptions import ValidationException
from caseflow.infrastructure.persistence.models import Firm
from caseflow.infrastructure.persistence.repositories import (
    ScheduledStepRepository,
    WorkflowRepository,
)
from caseflow.schemas.workflow import WorkflowCreate
from caseflow.shared.enums import WorkflowTrigger
from caseflow.shared.utils.datetime import utc_now

STEP = {
    "id": "step-1",
    "order": 1,
    "action": "update_case_status",
    "config": {"newStatus": "discovery"},
}


async def _firm_id(db_session) -> str:
    firm = Firm(name="Repo Test Firm")
    db_session.add(firm)
    await db_session.flush()
    return firm.id


@pytest.mark.requires_db
async def test_active_workflows_for_trigger(db_session) -> None:
    firm_id = await _firm_id(db_session)
    repo = WorkflowRepository(db_session)
    active = await repo.create_workflow(
        firm_id,
        WorkflowCreate(name="Active", trigger=WorkflowTrigger.CASE_CREATED, steps=[STEP]),
    )
    await repo.create_workflow(
        firm_id,
        WorkflowCreate(
            name="Inactive",
            trigger=WorkflowTrigger.CASE_CREATED,
            steps=[STEP],
            is_active=False,
        ),
    )

    found = await repo.get_active_for_trigger(firm_id, "case_created")

    assert [w.id for w in found] == [active.id]
    assert found[0].steps[0].config.new_status == "discovery"

    assert await repo.set_active(active.id, False) is True
    assert await repo.get_active_for_trigger(firm_id, "case_created") == []


@pytest.mark.requires_db
async def test_create_workflow_rejects_unresolvable_step(db_session) -> None:
    firm_id = await _firm_id(db_session)
    with pytest.raises(ValidationException, match="Unknown action kind"):
        await WorkflowRepository(db_session).create_workflow(
            firm_id,
            WorkflowCreate(
                name="Broken",
                trigger=WorkflowTrigger.TASK_CREATED,
                steps=[{"id": "s", "action": "send_fax", "config": {}}],
            ),
        )


@pytest.mark.requires_db
async def test_claim_is_granted_once(db_session) -> None:
    firm_id = await _firm_id(db_session)
    workflow = await WorkflowRepository(db_session).create_workflow(
        firm_id,
        WorkflowCreate(name="Deferred", trigger=WorkflowTrigger.TASK_OVERDUE, steps=[STEP]),
    )
    repo = ScheduledStepRepository(db_session)
    now = utc_now()
    record = await repo.create_pending(
        firm_id=firm_id,
        workflow_id=workflow.id,
        step_id="step-1",
        event_data={"firmId": firm_id, "entityId": "t1", "entityType": "task"},
        execute_at=now - timedelta(minutes=1),
    )

    assert record.id in await repo.list_due_ids(now, 10)
    assert await repo.claim(record.id, now) is True
    assert await repo.claim(record.id, now) is False
    assert record.id not in await repo.list_due_ids(now, 10)
    assert await repo.mark_executed(record.id, now) is True
    assert await repo.mark_failed(record.id, "late", now) is False
