"""Tests for atomic condition evaluation."""

import pytest

from bizscore.services.rule_engine.engine import ConditionEvaluator
from factories import make_condition, make_record


@pytest.fixture
def evaluator():
    return ConditionEvaluator()


class TestNumericConditions:
    @pytest.mark.parametrize(
        "operator,threshold,expected",
        [
            ("GREATER_THAN", 1_000_000, True),
            ("GREATER_THAN", 2_000_000, False),
            ("LESS_THAN", 3_000_000, True),
            ("LESS_THAN", 2_000_000, False),
            ("GREATER_THAN_OR_EQUAL", 2_000_000, True),
            ("LESS_THAN_OR_EQUAL", 2_000_000, True),
            ("LESS_THAN_OR_EQUAL", 1_999_999, False),
            ("EQUALS", 2_000_000, True),
            ("EQUALS", 2_000_001, False),
        ],
    )
    def test_revenue_comparisons(self, evaluator, operator, threshold, expected):
        condition = make_condition("annualRevenue", operator, numeric_value=threshold)
        assert evaluator.evaluate(condition, make_record(annual_revenue=2_000_000.0)) is expected

    def test_missing_threshold_compares_as_zero(self, evaluator):
        condition = make_condition("employeeCount", "GREATER_THAN")
        assert evaluator.evaluate(condition, make_record(employee_count=1)) is True
        assert evaluator.evaluate(condition, make_record(employee_count=0)) is False

    def test_equals_never_matches_missing_threshold(self, evaluator):
        condition = make_condition("employeeCount", "EQUALS")
        assert evaluator.evaluate(condition, make_record(employee_count=0)) is False

    def test_null_attribute_is_false(self, evaluator):
        condition = make_condition("creditHistory", "LESS_THAN", numeric_value=10)
        assert evaluator.evaluate(condition, make_record(credit_history=None)) is False

    def test_string_operator_on_numeric_field_is_false(self, evaluator):
        condition = make_condition("annualRevenue", "CONTAINS", value="2")
        assert evaluator.evaluate(condition, make_record()) is False


class TestStringConditions:
    @pytest.mark.parametrize(
        "operator,value,expected",
        [
            ("EQUALS", "acme manufacturing", True),
            ("CONTAINS", "MANUFACT", True),
            ("STARTS_WITH", "acme", True),
            ("ENDS_WITH", "Manufacturing", True),
            ("ENDS_WITH", "Acme", False),
            ("CONTAINS", "bank", False),
        ],
    )
    def test_company_name_is_case_insensitive(self, evaluator, operator, value, expected):
        condition = make_condition("companyName", operator, value=value)
        assert evaluator.evaluate(condition, make_record()) is expected

    def test_missing_comparison_value_is_false(self, evaluator):
        condition = make_condition("industry", "EQUALS", value=None)
        assert evaluator.evaluate(condition, make_record()) is False

    def test_null_industry_is_false(self, evaluator):
        condition = make_condition("industry", "CONTAINS", value="retail")
        assert evaluator.evaluate(condition, make_record(industry=None)) is False

    def test_numeric_operator_on_string_field_is_false(self, evaluator):
        condition = make_condition("industry", "GREATER_THAN", value="a")
        assert evaluator.evaluate(condition, make_record()) is False


class TestBooleanConditions:
    def test_existing_loans_equals(self, evaluator):
        condition = make_condition("hasExistingLoans", "EQUALS", boolean_value=True)
        assert evaluator.evaluate(condition, make_record(has_existing_loans=True)) is True
        assert evaluator.evaluate(condition, make_record(has_existing_loans=False)) is False

    def test_unknown_loan_status_is_false(self, evaluator):
        condition = make_condition("hasExistingLoans", "EQUALS", boolean_value=False)
        assert evaluator.evaluate(condition, make_record(has_existing_loans=None)) is False

    def test_only_equals_is_supported(self, evaluator):
        condition = make_condition("hasExistingLoans", "GREATER_THAN", boolean_value=False)
        assert evaluator.evaluate(condition, make_record(has_existing_loans=True)) is False


class TestFailClosed:
    def test_unknown_field(self, evaluator):
        condition = make_condition("netWorth", "GREATER_THAN", numeric_value=0)
        assert evaluator.evaluate(condition, make_record()) is False

    def test_unknown_operator(self, evaluator):
        condition = make_condition("annualRevenue", "BETWEEN", numeric_value=0)
        assert evaluator.evaluate(condition, make_record()) is False

    def test_evaluation_error_is_swallowed_and_logged(self, evaluator, caplog):
        # A non-numeric attribute cannot be coerced to float
        condition = make_condition("annualRevenue", "GREATER_THAN", numeric_value=0)
        record = make_record(annual_revenue="lots")

        with caplog.at_level("WARNING"):
            assert evaluator.evaluate(condition, record) is False

        assert "Error evaluating condition" in caplog.text
