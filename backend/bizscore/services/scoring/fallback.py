"""Deterministic fallback scorer used when the oracle cannot answer."""

from decimal import Decimal
from typing import Any

from bizscore.core.enums import RiskLevel, ScoreSource
from bizscore.services.scoring.result import ScoreResult

BASE_SCORE = Decimal("0.5")

REVENUE_THRESHOLD = Decimal("1000000")
EMPLOYEE_THRESHOLD = 10
YEARS_THRESHOLD = 3
CREDIT_HISTORY_THRESHOLD = 2


class FallbackScorer:
    """
    Heuristic scorer with no external dependencies.

    Starting from 0.5 the score gains 0.2 for revenue above 1,000,000,
    0.1 each for more than 10 employees, more than 3 years in business and
    credit history above 2, and loses 0.1 for existing loans. The result is
    clamped to [0, 1] and bucketed by the configured thresholds. All
    arithmetic is Decimal so threshold comparisons are exact.
    """

    def __init__(self, low_threshold: float = 0.7, medium_threshold: float = 0.4):
        """
        Initialize the scorer.

        Args:
            low_threshold: Minimum score for the LOW risk bucket
            medium_threshold: Minimum score for the MEDIUM risk bucket
        """
        self.low_threshold = Decimal(str(low_threshold))
        self.medium_threshold = Decimal(str(medium_threshold))

    def calculate_score(self, record: Any) -> Decimal:
        """
        Calculate the heuristic score for an applicant record.

        Args:
            record: ApplicantRecord or persisted ScoringRequest

        Returns:
            Score between 0 and 1
        """
        score = BASE_SCORE

        if record.annual_revenue is not None and Decimal(str(record.annual_revenue)) > REVENUE_THRESHOLD:
            score += Decimal("0.2")

        if record.employee_count is not None and record.employee_count > EMPLOYEE_THRESHOLD:
            score += Decimal("0.1")

        if record.years_in_business is not None and record.years_in_business > YEARS_THRESHOLD:
            score += Decimal("0.1")

        if record.credit_history is not None and record.credit_history > CREDIT_HISTORY_THRESHOLD:
            score += Decimal("0.1")

        if record.has_existing_loans:
            score -= Decimal("0.1")

        return max(Decimal("0"), min(Decimal("1"), score))

    def risk_level_for(self, score: Decimal) -> RiskLevel:
        """Bucket a score: LOW at or above the low threshold, MEDIUM at or above the medium one."""
        if score >= self.low_threshold:
            return RiskLevel.LOW
        if score >= self.medium_threshold:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    def score(self, record: Any) -> ScoreResult:
        """
        Score a record.

        Args:
            record: Applicant record

        Returns:
            ScoreResult with source FALLBACK
        """
        score = self.calculate_score(record)
        return ScoreResult(
            score=float(score),
            risk_level=self.risk_level_for(score),
            source=ScoreSource.FALLBACK,
        )
