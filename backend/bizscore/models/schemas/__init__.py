"""Pydantic schemas for API validation and serialization."""

from bizscore.models.schemas.policy import (
    PolicyConditionCreate,
    PolicyConditionResponse,
    RiskPolicyCreate,
    RiskPolicyResponse,
    RiskPolicyStatusUpdate,
)
from bizscore.models.schemas.scoring import (
    ApplicantRecord,
    BatchFailure,
    BatchReport,
    BatchScoringRequest,
    DecisionUpdateRequest,
    DecisionView,
    ScoringDecisionResponse,
    ScoringListResponse,
    ScoringResponse,
    ScoringStatsResponse,
)

__all__ = [
    # Scoring schemas
    "ApplicantRecord",
    "BatchScoringRequest",
    "ScoringResponse",
    "ScoringListResponse",
    "ScoringStatsResponse",
    "ScoringDecisionResponse",
    "DecisionUpdateRequest",
    "DecisionView",
    "BatchFailure",
    "BatchReport",
    # Policy schemas
    "PolicyConditionCreate",
    "PolicyConditionResponse",
    "RiskPolicyCreate",
    "RiskPolicyStatusUpdate",
    "RiskPolicyResponse",
]
