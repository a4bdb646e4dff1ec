"""String condition evaluator (company name, industry)."""

from typing import Dict

from bizscore.core.enums import ConditionOperator, ValueKind
from bizscore.services.rule_engine.base import (
    ConditionKindEvaluator,
    ConditionLike,
    OperatorFn,
)


def _needle(condition: ConditionLike):
    return condition.value.lower() if condition.value is not None else None


def _compare(op):
    def comparison(value: str, condition: ConditionLike) -> bool:
        needle = _needle(condition)
        if needle is None:
            return False
        return op(value.lower(), needle)

    return comparison


class StringEvaluator(ConditionKindEvaluator):
    """
    Evaluator for string fields.

    All comparisons are case-insensitive: EQUALS, CONTAINS, STARTS_WITH and
    ENDS_WITH against ``value``.
    """

    kind = ValueKind.STRING

    def _coerce(self, value) -> str:
        return str(value)

    def _operators(self) -> Dict[ConditionOperator, OperatorFn]:
        return {
            ConditionOperator.EQUALS: _compare(lambda v, n: v == n),
            ConditionOperator.CONTAINS: _compare(lambda v, n: n in v),
            ConditionOperator.STARTS_WITH: _compare(lambda v, n: v.startswith(n)),
            ConditionOperator.ENDS_WITH: _compare(lambda v, n: v.endswith(n)),
        }
