"""Repository for scoring attempts with lookup and aggregate queries."""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.models.domain.scoring import ScoringRequest
from bizscore.repositories.base import BaseRepository


class ScoringRepository(BaseRepository[ScoringRequest]):
    """
    Repository for ScoringRequest.

    Duplicate company/tax id pairs are allowed; every attempt is its own row
    and lookups by company return the most recent attempt.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the scoring repository.

        Args:
            db: Async database session
        """
        super().__init__(ScoringRequest, db)

    async def get_latest_by_company_and_tax_id(
        self, company_name: str, tax_id: str
    ) -> Optional[ScoringRequest]:
        """
        Get the most recent scoring attempt for a company.

        Args:
            company_name: Company name as submitted
            tax_id: Company tax id

        Returns:
            The latest ScoringRequest, or None if the company was never scored
        """
        stmt = (
            select(ScoringRequest)
            .where(ScoringRequest.company_name == company_name)
            .where(ScoringRequest.tax_id == tax_id)
            .order_by(ScoringRequest.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_scores(
        self,
        skip: int = 0,
        limit: int = 100,
        risk_level: Optional[str] = None,
    ) -> List[ScoringRequest]:
        """
        List scoring attempts, newest first, optionally filtered by risk bucket.

        Args:
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return
            risk_level: Optional risk bucket filter

        Returns:
            List of ScoringRequest instances
        """
        stmt = select(ScoringRequest).order_by(ScoringRequest.created_at.desc())

        if risk_level:
            stmt = stmt.where(ScoringRequest.risk_level == risk_level)

        stmt = stmt.offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def average_score(self) -> Optional[float]:
        """Average score across all scored attempts, None when nothing is scored."""
        stmt = select(func.avg(ScoringRequest.score)).where(
            ScoringRequest.score.is_not(None)
        )
        result = await self.db.execute(stmt)
        value = result.scalar_one_or_none()
        return float(value) if value is not None else None

    async def count_by_risk_level(self) -> Dict[str, int]:
        """
        Count attempts per risk bucket in a single grouped query.

        Returns:
            Mapping of risk level to count (buckets without rows are absent)
        """
        stmt = (
            select(ScoringRequest.risk_level, func.count())
            .where(ScoringRequest.risk_level.is_not(None))
            .group_by(ScoringRequest.risk_level)
        )
        result = await self.db.execute(stmt)
        return {risk_level: count for risk_level, count in result.all()}
