"""
Client for the external scoring oracle.

The oracle is an HTTP service that returns an integer score on a 0-1000
scale together with a decision or risk signal. Transport failures are
retried with exponential backoff; every other problem is reported as an
OracleFailure value so callers can fall back without handling exceptions.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
)

from bizscore.config import Settings
from bizscore.core.enums import RiskLevel, ScoreSource
from bizscore.services.scoring.result import (
    OracleFailure,
    OracleFailureKind,
    OracleOutcome,
    OracleSuccess,
    ScoreResult,
)

logger = logging.getLogger(__name__)

SCORE_PATH = "/api/v1/score"
MAX_RAW_SCORE = 1000

# Response keys in lookup order; the first non-null value wins
SCORE_KEYS: Tuple[str, ...] = ("score", "Score", "final_score")
SIGNAL_KEYS: Tuple[str, ...] = ("decision", "Decision", "risk_level", "status")

# Checked in order against the upper-cased signal; the first match wins
SIGNAL_BUCKETS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...], RiskLevel], ...] = (
    # (substrings, exact tokens, bucket)
    (("APPROVE",), ("LOW",), RiskLevel.LOW),
    (("REJECT",), ("HIGH",), RiskLevel.HIGH),
    (("MANUAL", "REVIEW"), ("MEDIUM",), RiskLevel.MEDIUM),
)


def is_transport_error(exc: BaseException) -> bool:
    """Connection, timeout and protocol errors are retryable; HTTP statuses are not."""
    return isinstance(exc, httpx.TransportError)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry schedule for oracle calls.

    Attempt ``n`` failing waits ``initial_delay * multiplier ** (n - 1)``
    seconds, capped at ``max_delay``, before attempt ``n + 1``.
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 4.0
    retryable: Callable[[BaseException], bool] = field(default=is_transport_error)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.ORACLE_RETRY_ATTEMPTS,
            initial_delay=settings.ORACLE_BACKOFF_INITIAL,
            multiplier=settings.ORACLE_BACKOFF_MULTIPLIER,
            max_delay=settings.ORACLE_BACKOFF_MAX,
        )

    def backoff(self, attempt: int) -> float:
        """Delay after the given (1-based) failed attempt."""
        return min(self.initial_delay * self.multiplier ** (attempt - 1), self.max_delay)

    def _wait(self, retry_state) -> float:
        return self.backoff(retry_state.attempt_number)

    def retrying(self) -> AsyncRetrying:
        """Build a tenacity controller for one call."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(self.retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared HTTP client with the configured oracle timeouts."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            settings.ORACLE_READ_TIMEOUT,
            connect=settings.ORACLE_CONNECT_TIMEOUT,
        )
    )


def build_request_body(record: Any) -> Dict[str, Any]:
    """
    Build the oracle request body from an applicant record.

    Args:
        record: ApplicantRecord or persisted ScoringRequest

    Returns:
        JSON-serializable dict with the oracle's camelCase keys
    """
    return {
        "companyName": record.company_name,
        "inn": record.tax_id,
        "businessType": record.business_type,
        "yearsInBusiness": record.years_in_business,
        "annualRevenue": record.annual_revenue,
        "employeeCount": record.employee_count,
        "requestedAmount": record.requested_amount,
        "hasExistingLoans": record.has_existing_loans,
        "industry": record.industry,
        "creditHistory": record.credit_history,
    }


def _first_present(payload: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[Any]:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def risk_level_for_signal(signal: str) -> RiskLevel:
    """
    Bucket an oracle decision signal.

    Matching is case-insensitive: a rule hits when the signal contains one of
    its substrings or equals one of its tokens. Unrecognized signals are MEDIUM.
    """
    normalized = signal.strip().upper()
    for substrings, tokens, risk_level in SIGNAL_BUCKETS:
        if normalized in tokens or any(part in normalized for part in substrings):
            return risk_level
    return RiskLevel.MEDIUM


def parse_score_payload(payload: Any) -> OracleOutcome:
    """
    Parse an oracle response body into a score result.

    Args:
        payload: Decoded JSON body

    Returns:
        OracleSuccess with a normalized score, or a PAYLOAD_INVALID failure
    """
    if not isinstance(payload, dict) or not payload:
        return OracleFailure(OracleFailureKind.PAYLOAD_INVALID, "empty or non-object response body")

    raw_score = _first_present(payload, SCORE_KEYS)
    if raw_score is None:
        return OracleFailure(OracleFailureKind.PAYLOAD_INVALID, "response has no score")
    if isinstance(raw_score, bool) or not isinstance(raw_score, int):
        return OracleFailure(
            OracleFailureKind.PAYLOAD_INVALID,
            f"score must be an integer, got {type(raw_score).__name__}",
        )
    if not 0 <= raw_score <= MAX_RAW_SCORE:
        return OracleFailure(
            OracleFailureKind.PAYLOAD_INVALID,
            f"score {raw_score} outside 0-{MAX_RAW_SCORE}",
        )

    signal = _first_present(payload, SIGNAL_KEYS)
    if signal is None:
        return OracleFailure(OracleFailureKind.PAYLOAD_INVALID, "response has no decision signal")
    if not isinstance(signal, str):
        return OracleFailure(
            OracleFailureKind.PAYLOAD_INVALID,
            f"decision signal must be a string, got {type(signal).__name__}",
        )

    risk_level = risk_level_for_signal(signal)
    return OracleSuccess(
        ScoreResult(
            score=raw_score / MAX_RAW_SCORE,
            risk_level=risk_level,
            source=ScoreSource.ORACLE,
        )
    )


class ScoreOracleClient:
    """
    Async client for the scoring oracle.

    ``score`` never raises: transport failures are retried per the injected
    RetryPolicy and every failure comes back as an OracleFailure.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """
        Initialize the client.

        Args:
            http_client: Shared AsyncClient (owned by the caller)
            base_url: Oracle base URL
            retry_policy: Retry schedule, defaults to 3 attempts with 1s/2s backoff
        """
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.retry_policy = retry_policy or RetryPolicy()

    @property
    def score_url(self) -> str:
        return f"{self.base_url}{SCORE_PATH}"

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        response: Optional[httpx.Response] = None
        async for attempt in self.retry_policy.retrying():
            with attempt:
                response = await self.http_client.post(self.score_url, json=body)
        return response

    async def score(self, record: Any) -> OracleOutcome:
        """
        Request a score for an applicant record.

        Args:
            record: Applicant record

        Returns:
            OracleSuccess or OracleFailure
        """
        body = build_request_body(record)

        try:
            response = await self._post(body)
        except httpx.TransportError as e:
            logger.warning(
                f"Scoring oracle unreachable after {self.retry_policy.max_attempts} attempts: {e}"
            )
            return OracleFailure(OracleFailureKind.UNAVAILABLE, f"transport error: {e}")
        except Exception as e:
            logger.error(f"Unexpected error calling scoring oracle: {e}", exc_info=True)
            return OracleFailure(OracleFailureKind.UNAVAILABLE, str(e))

        if not response.is_success:
            logger.warning(f"Scoring oracle returned HTTP {response.status_code}")
            return OracleFailure(
                OracleFailureKind.UNAVAILABLE,
                f"oracle returned HTTP {response.status_code}",
            )

        if not response.content:
            return OracleFailure(OracleFailureKind.PAYLOAD_INVALID, "empty response body")

        try:
            payload = response.json()
        except ValueError as e:
            return OracleFailure(OracleFailureKind.PAYLOAD_INVALID, f"malformed JSON: {e}")

        outcome = parse_score_payload(payload)
        if isinstance(outcome, OracleFailure):
            logger.warning(f"Invalid scoring oracle payload: {outcome.message}")
        return outcome
