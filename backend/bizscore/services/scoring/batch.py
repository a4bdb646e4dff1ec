"""Bounded fan-out of scoring attempts with a join barrier."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Sequence

from bizscore.models.schemas.scoring import (
    ApplicantRecord,
    BatchFailure,
    BatchReport,
    DecisionView,
)

logger = logging.getLogger(__name__)

ScoreOne = Callable[[ApplicantRecord], Awaitable[DecisionView]]


class BatchCoordinator:
    """
    Scores many records concurrently with at most ``max_workers`` in flight.

    Every record is awaited before the report is built. Outcomes keep input
    order within each partition. The report status is always COMPLETED;
    individual failures are listed in ``failed_results``.
    """

    def __init__(self, score_one: ScoreOne, max_workers: int = 10):
        """
        Initialize the coordinator.

        Args:
            score_one: Coroutine function that scores a single record
            max_workers: Maximum number of concurrent attempts
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.score_one = score_one
        self.max_workers = max_workers

    async def process_batch(self, records: Sequence[ApplicantRecord]) -> BatchReport:
        """
        Score all records and partition the outcomes.

        Args:
            records: Applicant records to score

        Returns:
            BatchReport with successes, failures and a summary line
        """
        batch_id = str(uuid.uuid4())
        semaphore = asyncio.Semaphore(self.max_workers)

        async def run(record: ApplicantRecord) -> DecisionView:
            async with semaphore:
                return await self.score_one(record)

        logger.info(
            f"Starting batch {batch_id}: {len(records)} records, "
            f"{self.max_workers} workers"
        )
        outcomes = await asyncio.gather(
            *(run(record) for record in records),
            return_exceptions=True,
        )

        successes: List[DecisionView] = []
        failures: List[BatchFailure] = []

        for record, outcome in zip(records, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(
                    f"Batch {batch_id}: scoring failed for {record.company_name}: {outcome}"
                )
                failures.append(
                    BatchFailure(
                        company_name=record.company_name,
                        tax_id=record.tax_id,
                        error=str(outcome) or type(outcome).__name__,
                    )
                )
            else:
                successes.append(outcome)

        summary = (
            f"Processed {len(records)} requests: "
            f"{len(successes)} successful, {len(failures)} failed"
        )
        logger.info(f"Batch {batch_id} completed. {summary}")

        return BatchReport(
            batch_id=batch_id,
            total_requests=len(records),
            successful_results=successes,
            failed_results=failures,
            processed_at=datetime.now(timezone.utc),
            summary=summary,
        )
