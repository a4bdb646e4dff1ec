"""Projection of a persisted score and its policy decision into a DecisionView."""

import logging
from typing import Dict, Optional

from bizscore.core.enums import DEFAULT_PRIORITY, PolicyAction, ProcessingStatus
from bizscore.core.exceptions import InvalidInputError
from bizscore.models.domain.scoring import ScoringDecision
from bizscore.models.schemas.scoring import (
    DecisionView,
    ScoringDecisionResponse,
    ScoringResponse,
)

logger = logging.getLogger(__name__)

NO_DECISION_REASON = "no policy decision available"
DEFAULT_DECISION_REASON = "policy decision applied"

STATUS_BY_ACTION: Dict[str, ProcessingStatus] = {
    PolicyAction.AUTO_APPROVE.value: ProcessingStatus.AUTO_APPROVED,
    PolicyAction.AUTO_REJECT.value: ProcessingStatus.AUTO_REJECTED,
    PolicyAction.ESCALATE_TO_MANAGER.value: ProcessingStatus.ESCALATED,
}


def processing_status_for(decision: Optional[str]) -> ProcessingStatus:
    """Map a policy decision to the caller-facing status; unknown decisions need review."""
    if decision is None:
        return ProcessingStatus.MANUAL_REVIEW
    return STATUS_BY_ACTION.get(decision, ProcessingStatus.MANUAL_REVIEW)


class ResponseEnricher:
    """Merges a scoring response with its decision."""

    def enrich(
        self,
        score_response: Optional[ScoringResponse],
        decision: Optional[ScoringDecision],
    ) -> DecisionView:
        """
        Build the caller-facing view.

        Args:
            score_response: Projected scoring attempt (required)
            decision: The attempt's policy decision, if any

        Returns:
            DecisionView; MANUAL_REVIEW with MEDIUM priority when there is no
            decision or the decision cannot be projected

        Raises:
            InvalidInputError: If score_response is missing
        """
        if score_response is None:
            raise InvalidInputError("score response is required for enrichment")

        base = score_response.model_dump()

        if decision is None:
            return DecisionView(
                **base,
                processing_status=ProcessingStatus.MANUAL_REVIEW,
                priority=DEFAULT_PRIORITY,
                decision_reason=NO_DECISION_REASON,
            )

        try:
            return DecisionView(
                **base,
                processing_status=processing_status_for(decision.decision),
                priority=decision.priority or DEFAULT_PRIORITY,
                decision_reason=decision.reason or DEFAULT_DECISION_REASON,
                decision_details=ScoringDecisionResponse.model_validate(decision),
            )
        except Exception as e:
            logger.error(
                f"Failed to enrich scoring response {score_response.id}: {e}",
                exc_info=True,
            )
            return DecisionView(
                **base,
                processing_status=ProcessingStatus.MANUAL_REVIEW,
                priority=DEFAULT_PRIORITY,
                decision_reason=f"enrichment error: {e}",
            )
