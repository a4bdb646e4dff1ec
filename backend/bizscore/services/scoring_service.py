"""Scoring service: single scoring, lookups and statistics."""

import logging
from typing import Any, Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.config import Settings, settings as default_settings
from bizscore.core.enums import RiskLevel
from bizscore.core.exceptions import InvalidInputError, PersistenceError
from bizscore.models.schemas.scoring import (
    ApplicantRecord,
    DecisionView,
    ScoringListResponse,
    ScoringResponse,
    ScoringStatsResponse,
)
from bizscore.repositories.decision_repository import DecisionRepository
from bizscore.repositories.scoring_repository import ScoringRepository
from bizscore.services.cache import (
    COMPANY_SCORES,
    SCORING_RESULTS,
    SCORING_STATS,
    STATS_KEY,
    ScoreCache,
    company_key,
)
from bizscore.services.scoring.enricher import ResponseEnricher
from bizscore.services.scoring.fallback import FallbackScorer
from bizscore.services.scoring.oracle_client import ScoreOracleClient
from bizscore.services.scoring.orchestrator import DecisionOrchestrator

logger = logging.getLogger(__name__)


def as_applicant_record(record: Any) -> ApplicantRecord:
    """
    Validate caller input into an ApplicantRecord.

    Raises:
        InvalidInputError: If the record is missing or malformed
    """
    if record is None:
        raise InvalidInputError("scoring request is required")
    if isinstance(record, ApplicantRecord):
        return record
    try:
        return ApplicantRecord.model_validate(record)
    except ValidationError as e:
        raise InvalidInputError(f"invalid scoring request: {e}") from e


class ScoringService:
    """
    Scoring service used by the API layer.

    This service:
    - Runs the decision orchestrator and commits the attempt
    - Evicts the affected cache entries after a successful commit
    - Serves cached lookups by id and by company, and cached statistics
    """

    def __init__(
        self,
        db: AsyncSession,
        oracle_client: ScoreOracleClient,
        cache: ScoreCache,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the scoring service.

        Args:
            db: Async database session
            oracle_client: Client for the scoring oracle
            cache: Shared score cache
            settings: Application settings (fallback thresholds)
        """
        settings = settings or default_settings
        self.db = db
        self.cache = cache
        self.scoring_repo = ScoringRepository(db)
        self.decision_repo = DecisionRepository(db)
        self.enricher = ResponseEnricher()
        self.orchestrator = DecisionOrchestrator(
            db,
            oracle_client,
            fallback_scorer=FallbackScorer(
                low_threshold=settings.FALLBACK_LOW_THRESHOLD,
                medium_threshold=settings.FALLBACK_MEDIUM_THRESHOLD,
            ),
            enricher=self.enricher,
        )

    async def score(self, record: Any) -> DecisionView:
        """
        Score an applicant and record the outcome.

        Args:
            record: ApplicantRecord (or a mapping that validates into one)

        Returns:
            Enriched decision view

        Raises:
            InvalidInputError: If the record is missing or malformed
            PersistenceError: If the attempt could not be recorded
        """
        record = as_applicant_record(record)
        view = await self.orchestrator.run(record)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to commit scoring for {record.company_name}: {e}", exc_info=True)
            raise PersistenceError(f"Could not commit scoring attempt: {e}") from e

        self._evict(record, view.id)
        return view

    def _evict(self, record: ApplicantRecord, scoring_id: UUID) -> None:
        self.cache.evict(COMPANY_SCORES, company_key(record.company_name, record.tax_id))
        self.cache.evict(SCORING_RESULTS, scoring_id)
        self.cache.evict(SCORING_STATS, STATS_KEY)

    async def get_by_id(self, scoring_id: UUID) -> Optional[ScoringResponse]:
        """
        Get a scoring result by id (cached).

        Args:
            scoring_id: UUID of the scoring request

        Returns:
            The scoring response, or None if not found
        """
        cached = self.cache.get(SCORING_RESULTS, scoring_id)
        if cached is not None:
            return cached

        scoring_request = await self.scoring_repo.get_by_id(scoring_id)
        if not scoring_request:
            return None

        response = ScoringResponse.model_validate(scoring_request)
        self.cache.set(SCORING_RESULTS, scoring_id, response)
        return response

    async def get_enhanced_score(self, scoring_id: UUID) -> Optional[DecisionView]:
        """
        Get a scoring result enriched with its current decision.

        Not cached: the decision's review state changes independently.

        Args:
            scoring_id: UUID of the scoring request

        Returns:
            The decision view, or None if not found
        """
        response = await self.get_by_id(scoring_id)
        if response is None:
            return None

        decision = await self.decision_repo.get_by_scoring_request_id(scoring_id)
        return self.enricher.enrich(response, decision)

    async def get_by_company_and_tax_id(
        self, company_name: str, tax_id: str
    ) -> Optional[ScoringResponse]:
        """
        Get the latest scoring result for a company (cached).

        Args:
            company_name: Company name
            tax_id: Company tax id

        Returns:
            The latest scoring response, or None if the company was never scored
        """
        key = company_key(company_name, tax_id)
        cached = self.cache.get(COMPANY_SCORES, key)
        if cached is not None:
            return cached

        scoring_request = await self.scoring_repo.get_latest_by_company_and_tax_id(
            company_name, tax_id
        )
        if not scoring_request:
            return None

        response = ScoringResponse.model_validate(scoring_request)
        self.cache.set(COMPANY_SCORES, key, response)
        return response

    async def list_scores(
        self,
        skip: int = 0,
        limit: int = 100,
        risk_level: Optional[RiskLevel] = None,
    ) -> ScoringListResponse:
        """
        List scoring results, newest first.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            risk_level: Optional risk bucket filter

        Returns:
            Paginated scoring results
        """
        level = risk_level.value if risk_level else None
        items = await self.scoring_repo.list_scores(skip=skip, limit=limit, risk_level=level)
        total = (
            await self.scoring_repo.count(risk_level=level)
            if level
            else await self.scoring_repo.count()
        )
        return ScoringListResponse(
            items=[ScoringResponse.model_validate(item) for item in items],
            total=total,
            skip=skip,
            limit=limit,
        )

    async def get_stats(self) -> ScoringStatsResponse:
        """Aggregate scoring statistics (cached)."""
        cached = self.cache.get(SCORING_STATS, STATS_KEY)
        if cached is not None:
            return cached

        by_level = await self.scoring_repo.count_by_risk_level()
        stats = ScoringStatsResponse(
            total_requests=await self.scoring_repo.count(),
            average_score=await self.scoring_repo.average_score(),
            low_risk_count=by_level.get(RiskLevel.LOW.value, 0),
            medium_risk_count=by_level.get(RiskLevel.MEDIUM.value, 0),
            high_risk_count=by_level.get(RiskLevel.HIGH.value, 0),
        )
        self.cache.set(SCORING_STATS, STATS_KEY, stats)
        return stats
