"""Batch scoring service: one session per record over a bounded pool."""

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bizscore.config import Settings, settings as default_settings
from bizscore.core.exceptions import InvalidInputError
from bizscore.models.schemas.scoring import ApplicantRecord, BatchReport, DecisionView
from bizscore.services.cache import ScoreCache
from bizscore.services.scoring.batch import BatchCoordinator
from bizscore.services.scoring.oracle_client import ScoreOracleClient
from bizscore.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)


class BatchScoringService:
    """
    Scores a list of applicants concurrently.

    Each record is scored by its own ScoringService on its own session, so
    one record's rollback never affects another. A record whose scoring
    raises (persistence failure) is reported in ``failed_results``; oracle
    problems are absorbed by the fallback and count as successes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        oracle_client: ScoreOracleClient,
        cache: ScoreCache,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the batch service.

        Args:
            session_factory: Factory for per-record sessions
            oracle_client: Shared scoring oracle client
            cache: Shared score cache
            settings: Application settings (worker count, batch size)
        """
        self.settings = settings or default_settings
        self.session_factory = session_factory
        self.oracle_client = oracle_client
        self.cache = cache
        self.coordinator = BatchCoordinator(
            self._score_one, max_workers=self.settings.BATCH_MAX_WORKERS
        )

    async def _score_one(self, record: ApplicantRecord) -> DecisionView:
        async with self.session_factory() as session:
            service = ScoringService(session, self.oracle_client, self.cache, self.settings)
            return await service.score(record)

    async def process_batch(self, records: Sequence[ApplicantRecord]) -> BatchReport:
        """
        Score all records.

        Args:
            records: Applicant records

        Returns:
            BatchReport with status COMPLETED

        Raises:
            InvalidInputError: If the batch is empty or exceeds BATCH_MAX_SIZE
        """
        if not records:
            raise InvalidInputError("batch must contain at least one request")
        if len(records) > self.settings.BATCH_MAX_SIZE:
            raise InvalidInputError(
                f"batch size {len(records)} exceeds maximum of {self.settings.BATCH_MAX_SIZE}"
            )

        return await self.coordinator.process_batch(records)
