"""Domain exceptions raised by the scoring core."""


class ScoringError(Exception):
    """Base class for scoring engine errors."""


class InvalidInputError(ScoringError, ValueError):
    """Malformed input rejected before orchestration begins."""


class PersistenceError(ScoringError):
    """A scoring attempt could not be recorded."""


class DecisionNotFoundError(ScoringError):
    """No scoring decision exists with the requested ID."""


class DecisionAlreadyResolvedError(ScoringError):
    """The decision has already left the PENDING state."""


class PolicyNotFoundError(ScoringError):
    """No risk policy exists with the requested ID."""


class RateLimitExceededError(ScoringError):
    """A client exceeded its request budget for an endpoint."""

    def __init__(self, message: str, retry_after_seconds: int):
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds
