"""Condition and policy evaluation for risk policies."""

import logging
from typing import Any, Dict, Optional, Sequence

from bizscore.core.enums import (
    ConditionField,
    ConditionOperator,
    LogicalOperator,
    ValueKind,
)
from bizscore.services.rule_engine.base import (
    ConditionKindEvaluator,
    ConditionLike,
    FieldSpec,
)
from bizscore.services.rule_engine.evaluators import (
    BooleanEvaluator,
    NumericEvaluator,
    StringEvaluator,
)

logger = logging.getLogger(__name__)

# Closed registry of condition fields and the record attribute behind each one
FIELD_SPECS: Dict[ConditionField, FieldSpec] = {
    ConditionField.ANNUAL_REVENUE: FieldSpec("annual_revenue", ValueKind.NUMERIC),
    ConditionField.YEARS_IN_BUSINESS: FieldSpec("years_in_business", ValueKind.NUMERIC),
    ConditionField.EMPLOYEE_COUNT: FieldSpec("employee_count", ValueKind.NUMERIC),
    ConditionField.REQUESTED_AMOUNT: FieldSpec("requested_amount", ValueKind.NUMERIC),
    ConditionField.CREDIT_HISTORY: FieldSpec("credit_history", ValueKind.NUMERIC),
    ConditionField.HAS_EXISTING_LOANS: FieldSpec("has_existing_loans", ValueKind.BOOLEAN),
    ConditionField.COMPANY_NAME: FieldSpec("company_name", ValueKind.STRING),
    ConditionField.INDUSTRY: FieldSpec("industry", ValueKind.STRING),
}


def _parse_enum(enum_cls, raw: Optional[str]):
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


class ConditionEvaluator:
    """
    Evaluates one atomic policy condition against an applicant record.

    This class:
    - Maps the condition field to a record attribute through FIELD_SPECS
    - Dispatches to the evaluator registered for the field's value kind
    - Fails closed: unknown fields/operators and any evaluation error give False
    """

    def __init__(self):
        """Initialize the evaluator with the kind registry."""
        self._evaluators: Dict[ValueKind, ConditionKindEvaluator] = {}
        self._register_default_evaluators()

    def _register_default_evaluators(self):
        """Register default evaluators for all value kinds."""
        for evaluator in (NumericEvaluator(), StringEvaluator(), BooleanEvaluator()):
            self._evaluators[evaluator.kind] = evaluator

    def evaluate(self, condition: ConditionLike, record: Any) -> bool:
        """
        Evaluate a condition against an applicant record.

        Args:
            condition: Condition with field, operator and comparison values
            record: ApplicantRecord or persisted ScoringRequest

        Returns:
            Whether the predicate holds. Never raises.
        """
        try:
            field = _parse_enum(ConditionField, condition.field)
            operator = _parse_enum(ConditionOperator, condition.operator)
            if field is None or operator is None:
                logger.debug(
                    f"Unknown condition field/operator: {condition.field!r} {condition.operator!r}"
                )
                return False

            spec = FIELD_SPECS[field]
            evaluator = self._evaluators.get(spec.kind)
            if evaluator is None:
                return False

            return evaluator.evaluate(spec.read(record), operator, condition)

        except Exception as e:
            logger.warning(
                f"Error evaluating condition for field {getattr(condition, 'field', None)}: {e}"
            )
            return False


class PolicyEvaluator:
    """
    Combines a policy's ordered conditions into one boolean.

    The connector stored on a condition joins it to the *next* condition, so
    evaluation is a strict left fold::

        result = eval(c0)
        result = result <c0.logical_operator> eval(c1)
        result = result <c1.logical_operator> eval(c2)
        ...

    This is not a boolean expression tree: ``A OR B AND C`` is evaluated as
    ``(A or B) and C``. A missing connector restarts the fold from the following
    condition, while an unrecognized one leaves the running result unchanged.
    """

    def __init__(self, condition_evaluator: Optional[ConditionEvaluator] = None):
        self.condition_evaluator = condition_evaluator or ConditionEvaluator()

    def evaluate(self, policy: Any, record: Any) -> bool:
        """
        Evaluate all conditions of a policy.

        Args:
            policy: Object with an ordered ``conditions`` sequence
            record: Applicant record to test

        Returns:
            True if the folded result holds; a policy without conditions never matches
        """
        conditions: Sequence[ConditionLike] = policy.conditions or []
        if not conditions:
            return False

        result = False
        raw_connector: Optional[str] = None
        previous_connector: Optional[LogicalOperator] = None

        for index, condition in enumerate(conditions):
            current = self.condition_evaluator.evaluate(condition, record)

            if index == 0 or raw_connector is None:
                result = current
            elif previous_connector == LogicalOperator.AND:
                result = result and current
            elif previous_connector == LogicalOperator.OR:
                result = result or current

            raw_connector = condition.logical_operator
            previous_connector = _parse_enum(
                LogicalOperator, raw_connector.upper() if raw_connector else None
            )

        return result
