"""Single scoring attempt: intake, policies, score, persist, enrich."""

import logging
from typing import Dict, FrozenSet, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.core.enums import (
    DEFAULT_PRIORITY,
    MANUAL_REVIEW_DECISION,
    OrchestrationState,
    PENDING_FINAL_DECISION,
    SYSTEM_FALLBACK_POLICY,
)
from bizscore.core.exceptions import PersistenceError
from bizscore.models.domain.scoring import ScoringDecision, ScoringRequest
from bizscore.models.schemas.scoring import (
    ApplicantRecord,
    DecisionView,
    ScoringResponse,
)
from bizscore.repositories.decision_repository import DecisionRepository
from bizscore.repositories.policy_repository import PolicyRepository
from bizscore.repositories.scoring_repository import ScoringRepository
from bizscore.services.rule_engine.resolver import PolicyResolution, PolicyResolver
from bizscore.services.scoring.enricher import ResponseEnricher
from bizscore.services.scoring.fallback import FallbackScorer
from bizscore.services.scoring.oracle_client import ScoreOracleClient
from bizscore.services.scoring.result import OracleFailure, ScoreResult

logger = logging.getLogger(__name__)

FALLBACK_REASON = "fallback used due to error"

ALLOWED_TRANSITIONS: Dict[OrchestrationState, FrozenSet[OrchestrationState]] = {
    OrchestrationState.INTAKE: frozenset(
        {OrchestrationState.POLICY_EVALUATED, OrchestrationState.FALLBACK_RECOVERY}
    ),
    OrchestrationState.POLICY_EVALUATED: frozenset(
        {OrchestrationState.SCORED, OrchestrationState.FALLBACK_RECOVERY}
    ),
    OrchestrationState.SCORED: frozenset(
        {OrchestrationState.PERSISTED, OrchestrationState.FALLBACK_RECOVERY}
    ),
    OrchestrationState.FALLBACK_RECOVERY: frozenset({OrchestrationState.PERSISTED}),
    OrchestrationState.PERSISTED: frozenset({OrchestrationState.ENRICHED}),
    OrchestrationState.ENRICHED: frozenset(),
}


class ScoringAttempt:
    """
    State of one scoring attempt.

    The happy path is INTAKE -> POLICY_EVALUATED -> SCORED -> PERSISTED ->
    ENRICHED. Any state before PERSISTED may divert to FALLBACK_RECOVERY,
    which can only continue to PERSISTED.
    """

    def __init__(self, record: ApplicantRecord):
        self.record = record
        self.state = OrchestrationState.INTAKE
        self.history = [OrchestrationState.INTAKE]

    def advance(self, target: OrchestrationState) -> None:
        """
        Move to the next state.

        Raises:
            RuntimeError: If the transition is not allowed
        """
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal scoring transition {self.state.value} -> {target.value}"
            )
        self.state = target
        self.history.append(target)

    @property
    def recovered(self) -> bool:
        return OrchestrationState.FALLBACK_RECOVERY in self.history


class DecisionOrchestrator:
    """
    Runs a scoring attempt end to end against one database session.

    This class:
    - Persists the intake record and resolves the active policies against it
    - Scores with the oracle, falling back to the heuristic scorer on failure
    - Persists the score and a PENDING decision
    - On any error before the decision is persisted, rolls back and records
      a fresh fallback-scored attempt with a SYSTEM_FALLBACK decision

    The orchestrator flushes but never commits; the caller owns the
    transaction.
    """

    def __init__(
        self,
        db: AsyncSession,
        oracle_client: ScoreOracleClient,
        fallback_scorer: Optional[FallbackScorer] = None,
        resolver: Optional[PolicyResolver] = None,
        enricher: Optional[ResponseEnricher] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            db: Async database session
            oracle_client: Client for the external scoring oracle
            fallback_scorer: Heuristic scorer used when the oracle fails
            resolver: Policy resolver
            enricher: Response enricher
        """
        self.db = db
        self.oracle_client = oracle_client
        self.fallback_scorer = fallback_scorer or FallbackScorer()
        self.resolver = resolver or PolicyResolver()
        self.enricher = enricher or ResponseEnricher()
        self.scoring_repo = ScoringRepository(db)
        self.decision_repo = DecisionRepository(db)
        self.policy_repo = PolicyRepository(db)

    async def run(self, record: ApplicantRecord) -> DecisionView:
        """
        Score one applicant.

        Args:
            record: Validated applicant record

        Returns:
            Enriched decision view

        Raises:
            PersistenceError: If not even the fallback attempt can be recorded
        """
        attempt = ScoringAttempt(record)

        try:
            scoring_request = await self.scoring_repo.create(**record.model_dump())

            policies = await self.policy_repo.get_active_policies_by_types()
            resolution = self.resolver.resolve(scoring_request, policies)
            attempt.advance(OrchestrationState.POLICY_EVALUATED)

            result = await self._score(scoring_request)
            attempt.advance(OrchestrationState.SCORED)

            scoring_request, decision = await self._persist(
                scoring_request, result, resolution
            )
            attempt.advance(OrchestrationState.PERSISTED)

        except Exception as e:
            logger.warning(
                f"Scoring failed for {record.company_name} in state "
                f"{attempt.state.value}, recovering with fallback: {e}",
                exc_info=True,
            )
            scoring_request, decision = await self._recover(attempt)

        view = self.enricher.enrich(ScoringResponse.model_validate(scoring_request), decision)
        attempt.advance(OrchestrationState.ENRICHED)

        logger.info(
            f"Scored {record.company_name}: score={view.score} risk={view.risk_level} "
            f"source={view.score_source} status={view.processing_status}"
        )
        return view

    async def _score(self, scoring_request: ScoringRequest) -> ScoreResult:
        """Score with the oracle, using the fallback on any failure."""
        try:
            outcome = await self.oracle_client.score(scoring_request)
        except Exception as e:
            logger.warning(f"Scoring oracle raised unexpectedly, using fallback: {e}")
            return self.fallback_scorer.score(scoring_request)

        if isinstance(outcome, OracleFailure):
            logger.warning(
                f"Scoring oracle failed ({outcome.kind.value}: {outcome.message}), "
                f"using fallback for {scoring_request.company_name}"
            )
            return self.fallback_scorer.score(scoring_request)

        return outcome.result

    async def _persist(
        self,
        scoring_request: ScoringRequest,
        result: ScoreResult,
        resolution: PolicyResolution,
    ) -> Tuple[ScoringRequest, ScoringDecision]:
        scoring_request.score = result.score
        scoring_request.risk_level = result.risk_level.value
        scoring_request.score_source = result.source.value
        scoring_request = await self.scoring_repo.save(scoring_request)

        decision = await self.decision_repo.create(
            scoring_request_id=scoring_request.id,
            decision=resolution.decision,
            reason=resolution.reason,
            applied_policy=resolution.applied_policy,
            priority=resolution.priority,
            final_decision=PENDING_FINAL_DECISION,
        )
        return scoring_request, decision

    async def _recover(
        self, attempt: ScoringAttempt
    ) -> Tuple[ScoringRequest, ScoringDecision]:
        """Record a fallback-scored attempt after rolling back the failed one."""
        attempt.advance(OrchestrationState.FALLBACK_RECOVERY)

        try:
            await self.db.rollback()

            result = self.fallback_scorer.score(attempt.record)
            scoring_request = await self.scoring_repo.create(
                **attempt.record.model_dump(),
                score=result.score,
                risk_level=result.risk_level.value,
                score_source=result.source.value,
            )
            decision = await self.decision_repo.create(
                scoring_request_id=scoring_request.id,
                decision=MANUAL_REVIEW_DECISION,
                reason=FALLBACK_REASON,
                applied_policy=SYSTEM_FALLBACK_POLICY,
                priority=DEFAULT_PRIORITY,
                final_decision=PENDING_FINAL_DECISION,
            )
        except Exception as e:
            logger.error(
                f"Fallback persistence failed for {attempt.record.company_name}: {e}",
                exc_info=True,
            )
            raise PersistenceError(
                f"Could not record scoring attempt for {attempt.record.company_name}: {e}"
            ) from e

        attempt.advance(OrchestrationState.PERSISTED)
        return scoring_request, decision
