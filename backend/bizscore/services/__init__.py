"""Service layer for business logic."""

from bizscore.services.batch_service import BatchScoringService
from bizscore.services.cache import ScoreCache
from bizscore.services.decision_service import DecisionService
from bizscore.services.policy_service import RiskPolicyService
from bizscore.services.rate_limit import CounterStore, RateLimiter
from bizscore.services.scoring_service import ScoringService

__all__ = [
    "BatchScoringService",
    "CounterStore",
    "DecisionService",
    "RateLimiter",
    "RiskPolicyService",
    "ScoreCache",
    "ScoringService",
]
