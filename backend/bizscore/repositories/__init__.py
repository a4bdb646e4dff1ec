from .base import BaseRepository
from .decision_repository import DecisionRepository
from .policy_repository import PolicyRepository
from .scoring_repository import ScoringRepository

__all__ = [
    "BaseRepository",
    "DecisionRepository",
    "PolicyRepository",
    "ScoringRepository",
]
