"""Workflow step and condition schemas.

Steps are stored as camelCase JSON ({id, order, action, config, conditions,
delayMinutes}). parse_step resolves one stored step into a typed
WorkflowStepEntity once, at load time; executors never read raw config maps.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from caseflow.domain.entities.workflow import WorkflowStepEntity
from caseflow.shared.enums import (
    ChatProvider,
    ConditionOperator,
    RecipientType,
    WorkflowAction,
    WorkflowTrigger,
)


class _CamelModel(BaseModel):
    """Accepts camelCase keys (stored shape) or snake_case field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class Condition(_CamelModel):
    """Single predicate on an event-context path. All conditions of a step are ANDed."""

    field: str = Field(..., min_length=1)
    operator: ConditionOperator
    value: str | int | float | bool


# Step configs: one model per action kind


class _RecipientConfig(_CamelModel):
    recipient_type: RecipientType | None = None
    user_id: str | None = None

    @model_validator(mode="after")
    def _specific_user_needs_id(self) -> _RecipientConfig:
        if self.recipient_type == RecipientType.SPECIFIC_USER and not self.user_id:
            raise ValueError("recipientType 'specific_user' requires userId")
        return self


class NotifyUserConfig(_RecipientConfig):
    """In-app notification for each resolved user."""

    action: Literal["create_notification"] = "create_notification"
    recipient_type: RecipientType
    title: str
    message: str
    action_url: str | None = None
    notification_type: str = "workflow"


class SendEmailConfig(_RecipientConfig):
    """Email per resolved recipient; `email` is a literal address when no recipientType."""

    action: Literal["send_email"] = "send_email"
    email: str | None = None
    subject: str
    body: str

    @model_validator(mode="after")
    def _needs_recipient(self) -> SendEmailConfig:
        if self.recipient_type is None and not self.email:
            raise ValueError("send_email requires recipientType or email")
        return self


class SendSmsConfig(_RecipientConfig):
    """SMS per resolved recipient; `phone` is a literal number when no recipientType."""

    action: Literal["send_sms"] = "send_sms"
    phone: str | None = None
    message: str

    @model_validator(mode="after")
    def _needs_recipient(self) -> SendSmsConfig:
        if self.recipient_type is None and not self.phone:
            raise ValueError("send_sms requires recipientType or phone")
        return self


class _ChatConfig(_CamelModel):
    message: str
    channel: str | None = None
    team_id: str | None = None
    channel_id: str | None = None


class SendChatMessageConfig(_ChatConfig):
    """Chat message through the firm's enabled integration for `provider`."""

    action: Literal["send_chat_message"] = "send_chat_message"
    provider: ChatProvider


class SlackMessageConfig(_ChatConfig):
    action: Literal["send_slack_message"] = "send_slack_message"

    @property
    def provider(self) -> ChatProvider:
        return ChatProvider.SLACK


class TeamsMessageConfig(_ChatConfig):
    action: Literal["send_teams_message"] = "send_teams_message"

    @property
    def provider(self) -> ChatProvider:
        return ChatProvider.TEAMS


class CreateTaskConfig(_CamelModel):
    """Task with interpolated title/description; assignee literal or case lead."""

    action: Literal["create_task"] = "create_task"
    title: str
    description: str | None = None
    assigned_to_id: str | None = None
    assign_to: Literal["case_lead"] | None = None
    due_days: int | None = Field(default=None, ge=0)
    priority: str = "medium"


class UpdateCaseStatusConfig(_CamelModel):
    action: Literal["update_case_status"] = "update_case_status"
    new_status: str = Field(..., min_length=1)


class AssignToUserConfig(_CamelModel):
    """Set assigned_to_id on the triggering entity (or entityId) in entityTable."""

    action: Literal["assign_to_user"] = "assign_to_user"
    entity_table: str = Field(..., pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    user_id: str = Field(..., min_length=1)
    entity_id: str | None = None


StepConfig = Annotated[
    Union[
        NotifyUserConfig,
        SendEmailConfig,
        SendSmsConfig,
        SendChatMessageConfig,
        SlackMessageConfig,
        TeamsMessageConfig,
        CreateTaskConfig,
        UpdateCaseStatusConfig,
        AssignToUserConfig,
    ],
    Field(discriminator="action"),
]

_STEP_CONFIG_ADAPTER: TypeAdapter[Any] = TypeAdapter(StepConfig)


class WorkflowStepDefinition(_CamelModel):
    """Stored step shape before config resolution."""

    id: str = Field(..., min_length=1)
    order: int = 0
    action: str = Field(..., min_length=1)
    config: dict[str, Any] = Field(default_factory=dict)
    conditions: list[dict[str, Any]] | None = None
    delay_minutes: int | None = Field(default=None, ge=0)


class WorkflowCreate(BaseModel):
    """Input for creating a workflow (seed data, admin tooling)."""

    name: str = Field(..., min_length=1, max_length=255)
    trigger: WorkflowTrigger
    steps: list[dict[str, Any]] = Field(default_factory=list)
    description: str | None = None
    case_type: str | None = None
    is_active: bool = True


def _format_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
        for err in exc.errors()
    )


def _unreadable(raw: Any, position: int, message: str) -> WorkflowStepEntity:
    fields = raw if isinstance(raw, Mapping) else {}
    return WorkflowStepEntity(
        id=str(fields.get("id") or f"step-{position + 1}"),
        order=position,
        action=str(fields.get("action") or ""),
        config=None,
        error=message,
    )


def parse_step(raw: Any, position: int = 0) -> WorkflowStepEntity:
    """Resolve one stored step. Never raises: problems land in `error`.

    Args:
        raw: Stored step JSON; anything other than an object becomes an error step.
        position: Index in the stored list; fallback id/order for unreadable steps.
    """
    if not isinstance(raw, Mapping):
        return _unreadable(
            raw,
            position,
            f"Invalid step definition: expected an object, got {type(raw).__name__}",
        )
    try:
        definition = WorkflowStepDefinition.model_validate(raw)
    except ValidationError as e:
        return _unreadable(
            raw, position, f"Invalid step definition: {_format_errors(e)}"
        )

    def _failed(message: str) -> WorkflowStepEntity:
        return WorkflowStepEntity(
            id=definition.id,
            order=definition.order,
            action=definition.action,
            config=None,
            delay_minutes=definition.delay_minutes or 0,
            error=message,
        )

    if definition.action not in WorkflowAction.values():
        return _failed(f"Unknown action kind: {definition.action!r}")
    try:
        config = _STEP_CONFIG_ADAPTER.validate_python(
            {**definition.config, "action": definition.action}
        )
    except ValidationError as e:
        return _failed(f"Invalid {definition.action} config: {_format_errors(e)}")
    try:
        conditions = tuple(
            Condition.model_validate(c) for c in definition.conditions or []
        )
    except ValidationError as e:
        return _failed(f"Invalid condition: {_format_errors(e)}")

    return WorkflowStepEntity(
        id=definition.id,
        order=definition.order,
        action=definition.action,
        config=config,
        conditions=conditions,
        delay_minutes=definition.delay_minutes or 0,
    )


def parse_steps(raw_steps: Any) -> list[WorkflowStepEntity]:
    """Resolve all stored steps of a workflow (stored order preserved).

    A steps value that is not a list resolves to a single error step, so the
    workflow fails when run instead of silently doing nothing.
    """
    if raw_steps is None:
        return []
    if not isinstance(raw_steps, list):
        return [
            _unreadable(
                None,
                0,
                f"Invalid steps: expected a list, got {type(raw_steps).__name__}",
            )
        ]
    return [parse_step(raw, i) for i, raw in enumerate(raw_steps)]
