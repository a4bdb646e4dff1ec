"""Boolean condition evaluator (existing loans flag)."""

from typing import Dict

from bizscore.core.enums import ConditionOperator, ValueKind
from bizscore.services.rule_engine.base import ConditionKindEvaluator, OperatorFn


class BooleanEvaluator(ConditionKindEvaluator):
    """Evaluator for boolean fields. Only EQUALS against ``boolean_value``."""

    kind = ValueKind.BOOLEAN

    def _operators(self) -> Dict[ConditionOperator, OperatorFn]:
        return {
            ConditionOperator.EQUALS: lambda v, c: (
                c.boolean_value is not None and v == c.boolean_value
            ),
        }
