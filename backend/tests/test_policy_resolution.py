"""Tests for the left-fold policy evaluator and the policy resolver."""

import pytest

from bizscore.services.rule_engine.engine import PolicyEvaluator
from bizscore.services.rule_engine.resolver import PolicyResolver
from factories import make_condition, make_policy, make_record


def revenue_over(threshold, connector=None):
    return make_condition(
        "annualRevenue", "GREATER_THAN", numeric_value=threshold, logical_operator=connector
    )


def employees_over(threshold, connector=None):
    return make_condition(
        "employeeCount", "GREATER_THAN", numeric_value=threshold, logical_operator=connector
    )


ALWAYS = make_condition("employeeCount", "GREATER_THAN_OR_EQUAL", numeric_value=0)
NEVER = make_condition("employeeCount", "LESS_THAN", numeric_value=0)


def with_connector(condition, connector):
    return make_condition(
        condition.field,
        condition.operator,
        numeric_value=condition.numeric_value,
        logical_operator=connector,
    )


class TestPolicyEvaluator:
    @pytest.fixture
    def evaluator(self):
        return PolicyEvaluator()

    def test_and_policy_matches_large_company(self, evaluator):
        policy = make_policy(
            "large", "AUTO_APPROVE", [revenue_over(1_000_000, "AND"), employees_over(10)]
        )
        assert evaluator.evaluate(policy, make_record(annual_revenue=2_000_000.0, employee_count=20))

    def test_and_policy_rejects_small_revenue(self, evaluator):
        policy = make_policy(
            "large", "AUTO_APPROVE", [revenue_over(1_000_000, "AND"), employees_over(10)]
        )
        assert not evaluator.evaluate(policy, make_record(annual_revenue=500_000.0, employee_count=20))

    def test_policy_without_conditions_never_matches(self, evaluator):
        assert not evaluator.evaluate(make_policy("empty", "AUTO_APPROVE", []), make_record())

    def test_connectors_are_case_insensitive(self, evaluator):
        policy = make_policy("or", "AUTO_APPROVE", [with_connector(NEVER, "or"), ALWAYS])
        assert evaluator.evaluate(policy, make_record())

    def test_fold_is_left_to_right_not_precedence_based(self, evaluator):
        # true OR false AND false folds as (true or false) and false
        policy = make_policy(
            "chain",
            "AUTO_APPROVE",
            [with_connector(ALWAYS, "OR"), with_connector(NEVER, "AND"), NEVER],
        )
        assert evaluator.evaluate(policy, make_record()) is False

    def test_connector_belongs_to_previous_condition(self, evaluator):
        # The last condition's connector is never used
        policy = make_policy(
            "tail", "AUTO_APPROVE", [with_connector(ALWAYS, "AND"), with_connector(ALWAYS, "OR")]
        )
        assert evaluator.evaluate(policy, make_record()) is True

    def test_missing_connector_restarts_from_next_condition(self, evaluator):
        policy = make_policy("gap", "AUTO_APPROVE", [ALWAYS, NEVER])
        assert evaluator.evaluate(policy, make_record()) is False

    def test_missing_connector_mid_chain_uses_later_outcome(self, evaluator):
        policy = make_policy(
            "gap", "AUTO_APPROVE", [revenue_over(1_000_000), employees_over(10)]
        )
        record = make_record(annual_revenue=2_000_000, employee_count=5)

        assert evaluator.evaluate(policy, record) is False

    def test_missing_connector_discards_earlier_chain(self, evaluator):
        # (never AND always) is dropped; the fold restarts at the third condition
        policy = make_policy(
            "gap", "AUTO_APPROVE", [with_connector(NEVER, "AND"), ALWAYS, ALWAYS]
        )
        assert evaluator.evaluate(policy, make_record()) is True

    def test_unknown_connector_keeps_running_result(self, evaluator):
        policy = make_policy("xor", "AUTO_APPROVE", [with_connector(NEVER, "XOR"), ALWAYS])
        assert evaluator.evaluate(policy, make_record()) is False


class TestPolicyResolver:
    @pytest.fixture
    def resolver(self):
        return PolicyResolver()

    def test_defaults_when_nothing_matches(self, resolver):
        resolution = resolver.resolve(
            make_record(), [make_policy("never", "AUTO_REJECT", [NEVER])]
        )

        assert resolution.decision == "MANUAL_REVIEW"
        assert resolution.reason == "no matching policies"
        assert resolution.applied_policy is None
        assert resolution.priority == "MEDIUM"

    def test_priority_then_terminal_action(self, resolver):
        policies = [
            make_policy("big ask", "SET_PRIORITY", [ALWAYS], action_value="HIGH", priority=1),
            make_policy("low revenue", "AUTO_REJECT", [ALWAYS], priority=2),
        ]

        resolution = resolver.resolve(make_record(), policies)

        assert resolution.decision == "AUTO_REJECT"
        assert resolution.priority == "HIGH"
        assert resolution.applied_policy == "low revenue"
        assert resolution.reason == "Policy 'low revenue' triggered"

    def test_priority_after_terminal_match_is_not_applied(self, resolver):
        policies = [
            make_policy("approve", "AUTO_APPROVE", [ALWAYS], priority=1),
            make_policy("urgent", "SET_PRIORITY", [ALWAYS], action_value="HIGH", priority=2),
        ]

        resolution = resolver.resolve(make_record(), policies)

        assert resolution.decision == "AUTO_APPROVE"
        assert resolution.priority == "MEDIUM"

    def test_first_terminal_match_wins(self, resolver):
        policies = [
            make_policy("escalate", "ESCALATE_TO_MANAGER", [ALWAYS], priority=1),
            make_policy("reject", "AUTO_REJECT", [ALWAYS], priority=2),
        ]

        assert resolver.resolve(make_record(), policies).decision == "ESCALATE_TO_MANAGER"

    def test_set_priority_without_value_keeps_priority(self, resolver):
        policies = [
            make_policy("high", "SET_PRIORITY", [ALWAYS], action_value="HIGH"),
            make_policy("blank", "SET_PRIORITY", [ALWAYS], action_value=None),
        ]

        resolution = resolver.resolve(make_record(), policies)

        assert resolution.decision == "MANUAL_REVIEW"
        assert resolution.priority == "HIGH"

    def test_later_priority_policy_overrides_earlier(self, resolver):
        policies = [
            make_policy("high", "SET_PRIORITY", [ALWAYS], action_value="HIGH"),
            make_policy("low", "SET_PRIORITY", [ALWAYS], action_value="LOW"),
        ]

        assert resolver.resolve(make_record(), policies).priority == "LOW"
