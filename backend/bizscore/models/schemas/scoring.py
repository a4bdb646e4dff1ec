"""Pydantic schemas for scoring requests, decisions and batch reports."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bizscore.core.enums import (
    BatchStatus,
    PENDING_FINAL_DECISION,
    ProcessingStatus,
    RiskLevel,
    ScoreSource,
)


# ==================== Applicant Schemas ====================


class ApplicantRecord(BaseModel):
    """Normalized description of the business being scored. Immutable."""

    company_name: str = Field(..., min_length=1, max_length=255)
    tax_id: str = Field(..., min_length=1, max_length=20)
    business_type: Optional[str] = Field(None, max_length=100)
    years_in_business: int = Field(..., ge=0)
    annual_revenue: float = Field(..., ge=0)
    employee_count: int = Field(..., ge=0)
    requested_amount: float = Field(..., ge=0)
    has_existing_loans: Optional[bool] = None
    industry: Optional[str] = Field(None, max_length=100)
    credit_history: Optional[int] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("company_name", "tax_id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only identifiers."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class BatchScoringRequest(BaseModel):
    """Schema for a bulk scoring request."""

    requests: list[ApplicantRecord] = Field(..., min_length=1)


# ==================== Scoring Result Schemas ====================


class ScoringResponse(BaseModel):
    """Persisted scoring attempt projected for callers."""

    id: UUID
    company_name: str
    tax_id: str
    score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    score_source: Optional[ScoreSource] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScoringListResponse(BaseModel):
    """Schema for paginated list of scoring results."""

    items: list[ScoringResponse]
    total: int
    skip: int
    limit: int


class ScoringStatsResponse(BaseModel):
    """Aggregate statistics over all scoring attempts."""

    total_requests: int
    average_score: Optional[float] = None
    low_risk_count: int = 0
    medium_risk_count: int = 0
    high_risk_count: int = 0


# ==================== Decision Schemas ====================


class ScoringDecisionResponse(BaseModel):
    """Schema for a scoring decision including its review state."""

    id: UUID
    scoring_request_id: UUID
    decision: str
    reason: Optional[str] = None
    applied_policy: Optional[str] = None
    priority: Optional[str] = None
    final_decision: str = PENDING_FINAL_DECISION
    manager_notes: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DecisionUpdateRequest(BaseModel):
    """Reviewer resolution of a pending decision."""

    final_decision: str = Field(..., min_length=1, max_length=50)
    manager_notes: Optional[str] = None
    resolved_by: str = Field(..., min_length=1, max_length=255)

    @field_validator("final_decision")
    @classmethod
    def validate_final_decision(cls, v: str) -> str:
        """Normalize to upper case and forbid resetting to PENDING."""
        normalized = v.strip().upper()
        if not normalized:
            raise ValueError("final_decision must not be blank")
        if normalized == PENDING_FINAL_DECISION:
            raise ValueError("final_decision cannot be set back to PENDING")
        return normalized


class DecisionView(ScoringResponse):
    """Caller-facing scoring result enriched with the policy decision."""

    processing_status: ProcessingStatus = ProcessingStatus.MANUAL_REVIEW
    priority: str
    decision_reason: str
    decision_details: Optional[ScoringDecisionResponse] = None


# ==================== Batch Schemas ====================


class BatchFailure(BaseModel):
    """A batch item that could not be scored."""

    company_name: str
    tax_id: str
    error: str


class BatchReport(BaseModel):
    """Combined outcome of a batch scoring run."""

    batch_id: str
    total_requests: int
    successful_results: list[DecisionView] = []
    failed_results: list[BatchFailure] = []
    processed_at: datetime
    status: BatchStatus = BatchStatus.COMPLETED
    summary: Optional[str] = None
