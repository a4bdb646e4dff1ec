"""Policy resolution: pick the decision and priority for an applicant."""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from bizscore.core.enums import (
    DEFAULT_PRIORITY,
    MANUAL_REVIEW_DECISION,
    PolicyAction,
)
from bizscore.services.rule_engine.engine import PolicyEvaluator

logger = logging.getLogger(__name__)

NO_MATCH_REASON = "no matching policies"


@dataclass(frozen=True)
class PolicyResolution:
    """Outcome of running the active policy set against one record."""

    decision: str = MANUAL_REVIEW_DECISION
    reason: str = NO_MATCH_REASON
    applied_policy: Optional[str] = None
    priority: str = DEFAULT_PRIORITY


class PolicyResolver:
    """
    Selects the applicable decision from a priority-ordered policy set.

    Policies are scanned in the order given (ascending priority). A matching
    SET_PRIORITY policy only adjusts the priority and scanning continues.
    The first other matching policy decides and stops the scan, so priority
    policies ordered after it are never applied.
    """

    def __init__(self, policy_evaluator: Optional[PolicyEvaluator] = None):
        self.policy_evaluator = policy_evaluator or PolicyEvaluator()

    def resolve(self, record: Any, active_policies: Sequence[Any]) -> PolicyResolution:
        """
        Resolve the decision for a record.

        Args:
            record: Applicant record
            active_policies: Active policies sorted by ascending priority

        Returns:
            PolicyResolution with decision, reason, applied policy and priority
        """
        priority = DEFAULT_PRIORITY

        for policy in active_policies:
            if not self.policy_evaluator.evaluate(policy, record):
                continue

            if policy.action == PolicyAction.SET_PRIORITY.value:
                if policy.action_value:
                    priority = policy.action_value
                logger.debug(f"Policy '{policy.name}' set priority to {priority}")
                continue

            logger.info(f"Policy '{policy.name}' triggered with action {policy.action}")
            return PolicyResolution(
                decision=policy.action,
                reason=f"Policy '{policy.name}' triggered",
                applied_policy=policy.name,
                priority=priority,
            )

        return PolicyResolution(priority=priority)
