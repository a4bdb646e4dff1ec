"""Domain models for the application."""

from bizscore.models.domain.policy import PolicyCondition, RiskPolicy
from bizscore.models.domain.scoring import ScoringDecision, ScoringRequest

__all__ = [
    "RiskPolicy",
    "PolicyCondition",
    "ScoringRequest",
    "ScoringDecision",
]
