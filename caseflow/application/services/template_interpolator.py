"""Template interpolation: {{path.to.field}} placeholders against an event context.

Unresolved placeholders stay in the output verbatim so a broken template is
visible in the sent message instead of leaving a silent blank.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from caseflow.domain.entities.workflow import EventContext, as_tree
from caseflow.shared.utils.paths import MISSING, resolve_path, stringify

_PLACEHOLDER = re.compile(r"\{\{(\w+(?:\.\w+)*)\}\}", re.ASCII)


class TemplateInterpolator:
    """Substitutes placeholders; None values count as unresolved."""

    def interpolate(
        self, template: str, context: EventContext | Mapping[str, Any]
    ) -> str:
        tree = as_tree(context)

        def _replace(match: re.Match[str]) -> str:
            value = resolve_path(tree, match.group(1))
            if value is MISSING or value is None:
                return match.group(0)
            return stringify(value)

        return _PLACEHOLDER.sub(_replace, template)

    def interpolate_optional(
        self, template: str | None, context: EventContext | Mapping[str, Any]
    ) -> str | None:
        return None if template is None else self.interpolate(template, context)


_default = TemplateInterpolator()


def interpolate(template: str, context: EventContext | Mapping[str, Any]) -> str:
    """Module-level shortcut for TemplateInterpolator().interpolate."""
    return _default.interpolate(template, context)
