"""Scoring pipeline: oracle client, fallback scorer, orchestration and enrichment."""

from .batch import BatchCoordinator
from .enricher import ResponseEnricher
from .fallback import FallbackScorer
from .oracle_client import RetryPolicy, ScoreOracleClient, create_http_client
from .orchestrator import DecisionOrchestrator, ScoringAttempt
from .result import (
    OracleFailure,
    OracleFailureKind,
    OracleOutcome,
    OracleSuccess,
    ScoreResult,
)

__all__ = [
    "BatchCoordinator",
    "DecisionOrchestrator",
    "FallbackScorer",
    "OracleFailure",
    "OracleFailureKind",
    "OracleOutcome",
    "OracleSuccess",
    "ResponseEnricher",
    "RetryPolicy",
    "ScoreOracleClient",
    "ScoreResult",
    "ScoringAttempt",
    "create_http_client",
]
