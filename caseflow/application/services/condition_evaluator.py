"""Step condition evaluation against an event context.

Conditions are ANDed and evaluation stops at the first false one. A field
path that does not resolve satisfies only not_equals; equals, contains and
the numeric comparisons fail on it. Non-numeric operands fail numeric
comparisons instead of raising.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from caseflow.domain.entities.workflow import EventContext, as_tree
from caseflow.domain.exceptions import WorkflowConfigurationException
from caseflow.schemas.workflow import Condition
from caseflow.shared.enums import ConditionOperator
from caseflow.shared.utils.paths import MISSING, resolve_path, stringify


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float | None:
    """Numeric coercion; None when the value is not a finite number."""
    if isinstance(value, bool):
        return None
    if _is_number(value):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _values_equal(actual: Any, expected: Any) -> bool:
    """Exact equality; when types differ, compare string forms."""
    if actual is None or expected is None:
        return actual is expected
    if type(actual) is type(expected) or (_is_number(actual) and _is_number(expected)):
        return actual == expected
    return stringify(actual) == stringify(expected)


class ConditionEvaluator:
    """Evaluates step conditions. Stateless."""

    def evaluate(
        self,
        conditions: Iterable[Condition],
        context: EventContext | Mapping[str, Any],
    ) -> bool:
        """True when every condition holds (an empty list holds)."""
        tree = as_tree(context)
        return all(self._check(condition, tree) for condition in conditions)

    def _check(self, condition: Condition, tree: Mapping[str, Any]) -> bool:
        actual = resolve_path(tree, condition.field)
        operator = condition.operator
        if operator == ConditionOperator.EQUALS:
            return actual is not MISSING and _values_equal(actual, condition.value)
        if operator == ConditionOperator.NOT_EQUALS:
            return actual is MISSING or not _values_equal(actual, condition.value)
        if operator == ConditionOperator.CONTAINS:
            return isinstance(actual, str) and stringify(condition.value) in actual
        if operator in (ConditionOperator.GREATER_THAN, ConditionOperator.LESS_THAN):
            left = _to_number(actual)
            right = _to_number(condition.value)
            if left is None or right is None:
                return False
            if operator == ConditionOperator.GREATER_THAN:
                return left > right
            return left < right
        raise WorkflowConfigurationException(
            f"Unsupported condition operator: {operator!r}"
        )
