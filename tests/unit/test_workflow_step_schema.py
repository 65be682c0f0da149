"""Tests for parse_step: stored step JSON resolved into typed configs once."""

import pytest
from pydantic import ValidationError

from caseflow.schemas.workflow import (
    AssignToUserConfig,
    CreateTaskConfig,
    NotifyUserConfig,
    SendChatMessageConfig,
    SendEmailConfig,
    SlackMessageConfig,
    TeamsMessageConfig,
    WorkflowCreate,
    parse_step,
    parse_steps,
)
from caseflow.shared.enums import ChatProvider, ConditionOperator, RecipientType


def test_notify_step_resolves_with_camel_case_keys() -> None:
    step = parse_step(
        {
            "id": "step-1",
            "order": 1,
            "action": "create_notification",
            "config": {
                "recipientType": "assigned_user",
                "title": "Deadline",
                "message": "Due {{metadata.dueDate}}",
                "actionUrl": "/discovery/{{entityId}}",
            },
        }
    )
    assert step.error is None
    assert isinstance(step.config, NotifyUserConfig)
    assert step.config.recipient_type == RecipientType.ASSIGNED_USER
    assert step.config.action_url == "/discovery/{{entityId}}"
    assert step.config.notification_type == "workflow"
    assert step.delay_minutes == 0
    assert not step.is_deferred


def test_delay_and_conditions() -> None:
    step = parse_step(
        {
            "id": "s2",
            "order": 2,
            "action": "send_email",
            "delayMinutes": 1440,
            "conditions": [
                {"field": "metadata.amount", "operator": "greater_than", "value": 100}
            ],
            "config": {"email": "a@b.test", "subject": "S", "body": "<p>B</p>"},
        }
    )
    assert step.error is None
    assert isinstance(step.config, SendEmailConfig)
    assert step.is_deferred
    assert step.delay_minutes == 1440
    assert step.conditions[0].operator == ConditionOperator.GREATER_THAN
    assert step.conditions[0].value == 100


def test_unknown_action_kind_is_kept_with_error() -> None:
    step = parse_step({"id": "s1", "order": 1, "action": "send_fax", "config": {}})
    assert step.config is None
    assert step.error == "Unknown action kind: 'send_fax'"


def test_missing_required_config_key() -> None:
    step = parse_step(
        {"id": "s1", "action": "create_notification", "config": {"title": "T"}}
    )
    assert step.config is None
    assert step.error.startswith("Invalid create_notification config:")


def test_email_requires_recipient_type_or_address() -> None:
    step = parse_step(
        {"id": "s1", "action": "send_email", "config": {"subject": "S", "body": "B"}}
    )
    assert step.error is not None
    assert "recipientType or email" in step.error


def test_specific_user_requires_user_id() -> None:
    step = parse_step(
        {
            "id": "s1",
            "action": "create_notification",
            "config": {"recipientType": "specific_user", "title": "T", "message": "M"},
        }
    )
    assert step.error is not None
    assert "userId" in step.error


def test_malformed_condition_operator() -> None:
    step = parse_step(
        {
            "id": "s1",
            "action": "update_case_status",
            "config": {"newStatus": "closed"},
            "conditions": [{"field": "caseId", "operator": "between", "value": 1}],
        }
    )
    assert step.config is None
    assert step.error.startswith("Invalid condition:")


def test_unreadable_step_gets_positional_id() -> None:
    step = parse_step({"action": "send_email", "delayMinutes": -5}, position=2)
    assert step.id == "step-3"
    assert step.error.startswith("Invalid step definition:")


@pytest.mark.parametrize("raw", [None, "notify", 42, ["id", "a"]])
def test_non_object_step_becomes_error_step(raw) -> None:
    step = parse_step(raw, position=1)
    assert step.id == "step-2"
    assert step.action == ""
    assert step.config is None
    assert step.error.startswith("Invalid step definition: expected an object")


def test_chat_configs_carry_provider() -> None:
    slack = parse_step(
        {"id": "a", "action": "send_slack_message", "config": {"message": "hi"}}
    )
    teams = parse_step(
        {
            "id": "b",
            "action": "send_teams_message",
            "config": {"message": "hi", "teamId": "T1", "channelId": "C1"},
        }
    )
    generic = parse_step(
        {
            "id": "c",
            "action": "send_chat_message",
            "config": {"provider": "teams", "message": "hi"},
        }
    )
    assert isinstance(slack.config, SlackMessageConfig)
    assert slack.config.provider == ChatProvider.SLACK
    assert isinstance(teams.config, TeamsMessageConfig)
    assert teams.config.team_id == "T1"
    assert isinstance(generic.config, SendChatMessageConfig)
    assert generic.config.provider == ChatProvider.TEAMS


def test_create_task_defaults() -> None:
    step = parse_step(
        {
            "id": "t",
            "action": "create_task",
            "config": {"title": "Review {{caseName}}", "assignTo": "case_lead", "dueDays": 3},
        }
    )
    assert isinstance(step.config, CreateTaskConfig)
    assert step.config.priority == "medium"
    assert step.config.assign_to == "case_lead"
    assert step.config.due_days == 3


def test_assign_to_user_rejects_non_identifier_table() -> None:
    ok = parse_step(
        {
            "id": "a",
            "action": "assign_to_user",
            "config": {"entityTable": "task", "userId": "u1"},
        }
    )
    bad = parse_step(
        {
            "id": "b",
            "action": "assign_to_user",
            "config": {"entityTable": "task; drop table task", "userId": "u1"},
        }
    )
    assert isinstance(ok.config, AssignToUserConfig)
    assert bad.error is not None


def test_parse_steps_keeps_stored_order_and_ids() -> None:
    steps = parse_steps(
        [
            {"id": "b", "order": 2, "action": "update_case_status", "config": {"newStatus": "x"}},
            {"id": "a", "order": 1, "action": "update_case_status", "config": {"newStatus": "y"}},
        ]
    )
    assert [s.id for s in steps] == ["b", "a"]
    assert parse_steps(None) == []


def test_workflow_create_rejects_unknown_trigger() -> None:
    with pytest.raises(ValidationError):
        WorkflowCreate(name="x", trigger="something_happened")


def test_parse_steps_with_null_entry_keeps_the_valid_steps() -> None:
    steps = parse_steps(
        [
            None,
            {"id": "a", "order": 1, "action": "update_case_status", "config": {"newStatus": "y"}},
        ]
    )
    assert steps[0].error is not None
    assert steps[1].id == "a" and steps[1].error is None


def test_parse_steps_rejects_non_list_column() -> None:
    steps = parse_steps({"id": "a", "action": "create_notification"})
    assert len(steps) == 1
    assert steps[0].id == "step-1"
    assert steps[0].error == "Invalid steps: expected a list, got dict"
