"""Rule engine for evaluating applicant records against risk policies."""

from .base import ConditionKindEvaluator, ConditionLike, FieldSpec
from .engine import FIELD_SPECS, ConditionEvaluator, PolicyEvaluator
from .resolver import PolicyResolution, PolicyResolver

__all__ = [
    "FIELD_SPECS",
    "ConditionEvaluator",
    "ConditionKindEvaluator",
    "ConditionLike",
    "FieldSpec",
    "PolicyEvaluator",
    "PolicyResolution",
    "PolicyResolver",
]
