"""Condition evaluators, one per value kind."""

from .boolean_evaluator import BooleanEvaluator
from .numeric_evaluator import NumericEvaluator
from .string_evaluator import StringEvaluator

__all__ = [
    "BooleanEvaluator",
    "NumericEvaluator",
    "StringEvaluator",
]
