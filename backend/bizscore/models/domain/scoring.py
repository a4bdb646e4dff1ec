"""Scoring request and decision domain models."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bizscore.core.enums import PENDING_FINAL_DECISION
from bizscore.db.base import BaseModel


class ScoringRequest(BaseModel):
    """
    One scoring attempt for an applicant.

    Holds the applicant attributes as received and, once computed, the
    normalized score with its risk bucket and provenance. A re-score creates
    a new row; rows are never re-scored in place.
    """

    __tablename__ = "scoring_requests"

    # Applicant
    company_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    tax_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    business_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    years_in_business: Mapped[int] = mapped_column(Integer, nullable=False)
    annual_revenue: Mapped[float] = mapped_column(Float, nullable=False)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False)
    requested_amount: Mapped[float] = mapped_column(Float, nullable=False)
    has_existing_loans: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    credit_history: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Result
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    risk_level: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, index=True)
    score_source: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ScoringRequest(id={self.id}, company={self.company_name!r}, "
            f"score={self.score}, risk={self.risk_level})>"
        )


class ScoringDecision(BaseModel):
    """
    Automated policy decision for a scoring attempt.

    The engine writes decision/reason/applied_policy/priority once. The
    resolution fields (final_decision, manager_notes, resolved_by,
    resolved_at) are only changed by a reviewer.
    """

    __tablename__ = "scoring_decisions"

    scoring_request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("scoring_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    decision: Mapped[str] = mapped_column(String(50), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    applied_policy: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)

    # Resolution sub-state
    final_decision: Mapped[str] = mapped_column(
        String(50), nullable=False, default=PENDING_FINAL_DECISION, index=True
    )
    manager_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resolved_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_pending(self) -> bool:
        return self.final_decision == PENDING_FINAL_DECISION

    def __repr__(self) -> str:
        return (
            f"<ScoringDecision(id={self.id}, decision={self.decision}, "
            f"priority={self.priority}, final={self.final_decision})>"
        )
