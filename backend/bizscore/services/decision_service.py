"""Decision service for the manual review queue."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.core.exceptions import (
    DecisionAlreadyResolvedError,
    DecisionNotFoundError,
)
from bizscore.db.base import utcnow
from bizscore.models.domain.scoring import ScoringDecision
from bizscore.repositories.decision_repository import DecisionRepository

logger = logging.getLogger(__name__)


class DecisionService:
    """Resolves pending decisions and serves the review queue."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the decision service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = DecisionRepository(db)

    async def resolve_review(
        self,
        decision_id: UUID,
        final_decision: str,
        manager_notes: Optional[str],
        resolved_by: str,
    ) -> ScoringDecision:
        """
        Record a reviewer's final decision.

        Only the resolution fields change; the automated decision, reason,
        applied policy and priority are left as the engine wrote them.

        Args:
            decision_id: UUID of the decision
            final_decision: Reviewer's decision (anything but PENDING)
            manager_notes: Optional reviewer notes
            resolved_by: Reviewer identity

        Returns:
            The resolved decision

        Raises:
            DecisionNotFoundError: If no decision has this id
            DecisionAlreadyResolvedError: If the decision is no longer pending
        """
        decision = await self.repo.get_by_id(decision_id)
        if not decision:
            raise DecisionNotFoundError(f"Scoring decision {decision_id} not found")

        if not decision.is_pending:
            raise DecisionAlreadyResolvedError(
                f"Scoring decision {decision_id} already resolved as {decision.final_decision}"
            )

        decision.final_decision = final_decision
        decision.manager_notes = manager_notes
        decision.resolved_by = resolved_by
        decision.resolved_at = utcnow()

        decision = await self.repo.save(decision)
        await self.db.commit()

        logger.info(
            f"Decision {decision_id} resolved as {final_decision} by {resolved_by}"
        )
        return decision

    async def get_pending(self) -> List[ScoringDecision]:
        """Get all decisions awaiting review."""
        return await self.repo.get_pending()

    async def get_pending_by_priority(self, priority: str) -> List[ScoringDecision]:
        """
        Get pending decisions with the given priority.

        Args:
            priority: Priority label (matched case-insensitively)

        Returns:
            List of pending decisions
        """
        return await self.repo.get_pending(priority=priority.upper())
