"""Repository for scoring decisions and the manual review queue."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.core.enums import PENDING_FINAL_DECISION
from bizscore.models.domain.scoring import ScoringDecision
from bizscore.repositories.base import BaseRepository


class DecisionRepository(BaseRepository[ScoringDecision]):
    """Repository for ScoringDecision with review-queue queries."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the decision repository.

        Args:
            db: Async database session
        """
        super().__init__(ScoringDecision, db)

    async def get_by_scoring_request_id(
        self, scoring_request_id: UUID
    ) -> Optional[ScoringDecision]:
        """
        Get the decision recorded for a scoring attempt.

        Args:
            scoring_request_id: UUID of the scoring request

        Returns:
            The decision, or None if the attempt has none
        """
        stmt = (
            select(ScoringDecision)
            .where(ScoringDecision.scoring_request_id == scoring_request_id)
            .order_by(ScoringDecision.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending(self, priority: Optional[str] = None) -> List[ScoringDecision]:
        """
        Get decisions awaiting review, newest first.

        Args:
            priority: Optional priority filter

        Returns:
            List of pending decisions
        """
        stmt = (
            select(ScoringDecision)
            .where(ScoringDecision.final_decision == PENDING_FINAL_DECISION)
            .order_by(ScoringDecision.created_at.desc())
        )

        if priority:
            stmt = stmt.where(ScoringDecision.priority == priority)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
