"""Workflow domain entities.

A workflow is a firm-scoped rule: a trigger kind, an optional case-type
filter, and ordered steps. Steps arrive here already resolved: their config
is a typed model, or `error` explains why it could not be resolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from caseflow.schemas.workflow import Condition, StepConfig


@dataclass(frozen=True)
class EventContext:
    """Payload describing the domain event a workflow reacts to.

    Serialized with camelCase keys (firmId, caseName, metadata.dueDate) since
    stored conditions and templates address fields by those paths.
    """

    firm_id: str
    entity_id: str
    entity_type: str
    case_id: str | None = None
    case_name: str | None = None
    case_number: str | None = None
    user_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def entity_subtype(self) -> str | None:
        """Subtype used for workflow case-type filtering (entitySubtype, else caseType)."""
        value = self.metadata.get("entitySubtype", self.metadata.get("caseType"))
        return str(value) if value is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Generic tree for path lookups and persistence; unset optionals are omitted."""
        data: dict[str, Any] = {
            "firmId": self.firm_id,
            "entityId": self.entity_id,
            "entityType": self.entity_type,
            "metadata": dict(self.metadata),
        }
        optional = {
            "caseId": self.case_id,
            "caseName": self.case_name,
            "caseNumber": self.case_number,
            "userId": self.user_id,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventContext:
        """Rebuild a context stored by to_dict (deferred steps, execution records)."""
        return cls(
            firm_id=data["firmId"],
            entity_id=data["entityId"],
            entity_type=data["entityType"],
            case_id=data.get("caseId"),
            case_name=data.get("caseName"),
            case_number=data.get("caseNumber"),
            user_id=data.get("userId"),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class WorkflowStepEntity:
    """One ordered step. `config` is None exactly when `error` is set."""

    id: str
    order: int
    action: str
    config: StepConfig | None
    conditions: tuple[Condition, ...] = ()
    delay_minutes: int = 0
    error: str | None = None

    @property
    def is_deferred(self) -> bool:
        return self.delay_minutes > 0


@dataclass
class WorkflowEntity:
    """Domain entity for a workflow definition (trigger + ordered steps)."""

    id: str
    firm_id: str
    name: str
    trigger: str
    is_active: bool
    case_type: str | None = None
    description: str | None = None
    steps: list[WorkflowStepEntity] = field(default_factory=list)

    def matches(self, trigger: str, subtype: str | None) -> bool:
        """Return whether this workflow is active, listens to `trigger` and accepts `subtype`."""
        if not self.is_active or self.trigger != trigger:
            return False
        return self.case_type is None or self.case_type == subtype

    def ordered_steps(self) -> list[WorkflowStepEntity]:
        """Steps by order ascending; ties broken by step id."""
        return sorted(self.steps, key=lambda s: (s.order, s.id))

    def find_step(self, step_id: str) -> WorkflowStepEntity | None:
        return next((s for s in self.steps if s.id == step_id), None)


def as_tree(context: EventContext | Mapping[str, Any]) -> Mapping[str, Any]:
    """Generic key-value view of a context for path lookups."""
    if isinstance(context, EventContext):
        return context.to_dict()
    return context
