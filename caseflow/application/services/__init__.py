"""Pure workflow services: condition evaluation and template interpolation."""

from caseflow.application.services.condition_evaluator import ConditionEvaluator
from caseflow.application.services.template_interpolator import (
    TemplateInterpolator,
    interpolate,
)

__all__ = ["ConditionEvaluator", "TemplateInterpolator", "interpolate"]
