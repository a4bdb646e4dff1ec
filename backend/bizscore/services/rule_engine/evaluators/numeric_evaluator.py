"""Numeric condition evaluator (revenue, headcount, amounts, history)."""

from typing import Dict

from bizscore.core.enums import ConditionOperator, ValueKind
from bizscore.services.rule_engine.base import (
    ConditionKindEvaluator,
    ConditionLike,
    OperatorFn,
)


def _threshold(condition: ConditionLike) -> float:
    # Ordering comparisons treat a missing comparison value as zero
    return condition.numeric_value if condition.numeric_value is not None else 0.0


class NumericEvaluator(ConditionKindEvaluator):
    """
    Evaluator for numeric fields.

    Handles GREATER_THAN, LESS_THAN, GREATER_THAN_OR_EQUAL,
    LESS_THAN_OR_EQUAL and EQUALS against ``numeric_value``. EQUALS is exact
    floating-point equality and never matches a missing value.
    """

    kind = ValueKind.NUMERIC

    def _coerce(self, value) -> float:
        return float(value)

    def _operators(self) -> Dict[ConditionOperator, OperatorFn]:
        return {
            ConditionOperator.GREATER_THAN: lambda v, c: v > _threshold(c),
            ConditionOperator.LESS_THAN: lambda v, c: v < _threshold(c),
            ConditionOperator.GREATER_THAN_OR_EQUAL: lambda v, c: v >= _threshold(c),
            ConditionOperator.LESS_THAN_OR_EQUAL: lambda v, c: v <= _threshold(c),
            ConditionOperator.EQUALS: lambda v, c: (
                c.numeric_value is not None and v == float(c.numeric_value)
            ),
        }
