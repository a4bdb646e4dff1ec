"""Score result values shared by the oracle client and fallback scorer."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from bizscore.core.enums import RiskLevel, ScoreSource


@dataclass(frozen=True)
class ScoreResult:
    """
    A normalized score with its risk bucket.

    Attributes:
        score: Normalized score in [0, 1]
        risk_level: LOW, MEDIUM or HIGH
        source: Whether the oracle or the fallback scorer produced it
    """

    score: float
    risk_level: RiskLevel
    source: ScoreSource

    def __post_init__(self):
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"score must be within [0, 1], got {self.score}")


class OracleFailureKind(str, Enum):
    """Why the oracle could not produce a score."""

    UNAVAILABLE = "UNAVAILABLE"
    PAYLOAD_INVALID = "PAYLOAD_INVALID"


@dataclass(frozen=True)
class OracleSuccess:
    result: ScoreResult


@dataclass(frozen=True)
class OracleFailure:
    kind: OracleFailureKind
    message: str


OracleOutcome = Union[OracleSuccess, OracleFailure]
