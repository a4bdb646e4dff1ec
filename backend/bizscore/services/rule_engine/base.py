"""Rule engine foundation: condition shape, field specs and kind evaluators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

from bizscore.core.enums import ConditionOperator, ValueKind


class ConditionLike(Protocol):
    """
    Shape of a policy condition as seen by the evaluators.

    Satisfied by the PolicyCondition ORM model and by plain test doubles.
    """

    field: str
    operator: str
    value: Optional[str]
    numeric_value: Optional[float]
    boolean_value: Optional[bool]
    logical_operator: Optional[str]


@dataclass(frozen=True)
class FieldSpec:
    """
    Accessor for one condition field.

    Attributes:
        attribute: Attribute name on the applicant record
        kind: Value kind, selects the evaluator and its operator set
    """

    attribute: str
    kind: ValueKind

    def read(self, record: Any) -> Any:
        """Read the field from an applicant record (None when absent)."""
        return getattr(record, self.attribute, None)


OperatorFn = Callable[[Any, ConditionLike], bool]


class ConditionKindEvaluator(ABC):
    """
    Abstract base class for value-kind evaluators using the Strategy pattern.

    Each concrete evaluator owns the closed operator table for one value
    kind (numeric, string, boolean). An operator outside the table never
    matches.
    """

    kind: ValueKind

    @abstractmethod
    def _operators(self) -> Dict[ConditionOperator, OperatorFn]:
        """
        Operator dispatch table for this kind.

        Returns:
            Mapping of supported operator to comparison function
        """
        pass

    def _coerce(self, value: Any) -> Any:
        """Convert the raw record attribute to this kind's comparison type."""
        return value

    def evaluate(
        self,
        value: Any,
        operator: ConditionOperator,
        condition: ConditionLike,
    ) -> bool:
        """
        Compare a record attribute against the condition.

        Args:
            value: Attribute read from the applicant record
            operator: Parsed condition operator
            condition: The condition carrying the comparison value

        Returns:
            True if the predicate holds; False for a null attribute or an
            operator this kind does not support
        """
        if value is None:
            return False

        comparison = self._operators().get(operator)
        if comparison is None:
            return False

        return bool(comparison(self._coerce(value), condition))
