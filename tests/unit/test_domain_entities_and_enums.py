"""Tests for domain entities (EventContext, WorkflowEntity) and enums."""

from caseflow.domain.entities.workflow import EventContext, WorkflowEntity
from caseflow.schemas.workflow import parse_steps
from caseflow.shared.enums import (
    ScheduledStepStatus,
    WorkflowAction,
    WorkflowExecutionStatus,
    WorkflowTrigger,
)
from caseflow.shared.utils.paths import MISSING, resolve_path


class TestEnums:
    def test_trigger_values(self) -> None:
        got = WorkflowTrigger.values()
        assert len(got) == 22
        assert "discovery_deadline_approaching" in got
        assert "payment_overdue" in got
        assert "task_overdue" in got

    def test_action_values(self) -> None:
        assert set(WorkflowAction.values()) >= {
            "create_notification",
            "send_email",
            "send_sms",
            "send_chat_message",
            "create_task",
            "update_case_status",
            "assign_to_user",
        }

    def test_status_values(self) -> None:
        assert WorkflowExecutionStatus.values() == ["running", "completed", "failed"]
        assert ScheduledStepStatus.values() == ["pending", "running", "executed", "failed"]


class TestEventContext:
    def test_to_dict_uses_camel_case_and_omits_unset(self) -> None:
        ctx = EventContext(
            firm_id="f1",
            entity_id="d1",
            entity_type="document",
            case_id="c1",
            metadata={"documentName": "Brief.pdf"},
        )
        assert ctx.to_dict() == {
            "firmId": "f1",
            "entityId": "d1",
            "entityType": "document",
            "caseId": "c1",
            "metadata": {"documentName": "Brief.pdf"},
        }

    def test_round_trip_through_dict(self) -> None:
        ctx = EventContext(
            firm_id="f1",
            entity_id="d1",
            entity_type="document",
            case_id="c1",
            case_name="Smith v. Jones",
            case_number="2026-1",
            user_id="u1",
            metadata={"nested": {"a": 1}},
        )
        assert EventContext.from_dict(ctx.to_dict()) == ctx

    def test_entity_subtype(self) -> None:
        base = {"firm_id": "f1", "entity_id": "e", "entity_type": "case"}
        assert EventContext(**base).entity_subtype is None
        assert EventContext(**base, metadata={"caseType": "family"}).entity_subtype == "family"
        assert (
            EventContext(
                **base, metadata={"entitySubtype": "probate", "caseType": "family"}
            ).entity_subtype
            == "probate"
        )


class TestWorkflowEntity:
    def _workflow(self, **kwargs) -> WorkflowEntity:
        defaults = dict(
            id="w1",
            firm_id="f1",
            name="W",
            trigger="document_uploaded",
            is_active=True,
        )
        defaults.update(kwargs)
        return WorkflowEntity(**defaults)

    def test_matches_trigger_and_subtype_filter(self) -> None:
        unfiltered = self._workflow()
        filtered = self._workflow(case_type="litigation")
        assert unfiltered.matches("document_uploaded", None)
        assert unfiltered.matches("document_uploaded", "family")
        assert not unfiltered.matches("document_filed", None)
        assert filtered.matches("document_uploaded", "litigation")
        assert not filtered.matches("document_uploaded", "family")
        assert not filtered.matches("document_uploaded", None)

    def test_inactive_never_matches(self) -> None:
        assert not self._workflow(is_active=False).matches("document_uploaded", None)

    def test_ordered_steps_ties_broken_by_id(self) -> None:
        steps = parse_steps(
            [
                {"id": "c", "order": 2, "action": "update_case_status", "config": {"newStatus": "x"}},
                {"id": "b", "order": 1, "action": "update_case_status", "config": {"newStatus": "x"}},
                {"id": "a", "order": 2, "action": "update_case_status", "config": {"newStatus": "x"}},
            ]
        )
        workflow = self._workflow(steps=steps)
        assert [s.id for s in workflow.ordered_steps()] == ["b", "a", "c"]
        assert workflow.find_step("a").order == 2
        assert workflow.find_step("zzz") is None


class TestResolvePath:
    def test_missing_is_distinct_from_none(self) -> None:
        tree = {"metadata": {"owner": None}}
        assert resolve_path(tree, "metadata.owner") is None
        assert resolve_path(tree, "metadata.other") is MISSING
        assert resolve_path(tree, "metadata..owner") is MISSING
        assert not MISSING
