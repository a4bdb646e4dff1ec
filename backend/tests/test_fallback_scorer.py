"""Tests for the deterministic fallback scorer."""

import random
from decimal import Decimal

import pytest

from bizscore.core.enums import RiskLevel, ScoreSource
from bizscore.services.scoring.fallback import FallbackScorer
from factories import make_record


@pytest.fixture
def scorer():
    return FallbackScorer(low_threshold=0.7, medium_threshold=0.4)


def test_strong_applicant_is_capped_at_one(scorer, strong_record):
    result = scorer.score(strong_record)

    # 0.5 + 0.2 + 0.1 + 0.1 + 0.1
    assert result.score == 1.0
    assert result.risk_level == RiskLevel.LOW
    assert result.source == ScoreSource.FALLBACK


def test_weak_applicant(scorer, weak_record):
    result = scorer.score(weak_record)

    assert result.score == pytest.approx(0.4)
    assert result.risk_level == RiskLevel.MEDIUM


def test_base_score_without_bonuses(scorer):
    record = make_record(
        annual_revenue=1_000_000.0,
        employee_count=10,
        years_in_business=3,
        credit_history=2,
        has_existing_loans=None,
    )
    assert scorer.calculate_score(record) == Decimal("0.5")


def test_exact_threshold_lands_in_upper_bucket(scorer):
    # 0.5 + 0.2 = 0.7 exactly
    record = make_record(
        annual_revenue=5_000_000.0,
        employee_count=1,
        years_in_business=1,
        credit_history=None,
        has_existing_loans=False,
    )
    result = scorer.score(record)

    assert result.score == pytest.approx(0.7)
    assert result.risk_level == RiskLevel.LOW


def test_thresholds_are_configurable():
    scorer = FallbackScorer(low_threshold=0.9, medium_threshold=0.6)
    assert scorer.risk_level_for(Decimal("0.8")) == RiskLevel.MEDIUM
    assert scorer.risk_level_for(Decimal("0.5")) == RiskLevel.HIGH


def random_record(rng):
    return make_record(
        annual_revenue=rng.choice([0.0, 999_999.0, 1_000_000.0, 1_000_001.0, rng.uniform(0, 1e8)]),
        employee_count=rng.randint(0, 50),
        years_in_business=rng.randint(0, 30),
        credit_history=rng.choice([None, rng.randint(0, 10)]),
        has_existing_loans=rng.choice([None, True, False]),
    )


@pytest.mark.parametrize("seed", range(20))
def test_score_is_bounded_and_bucket_consistent(scorer, seed):
    rng = random.Random(seed)

    for _ in range(50):
        score = scorer.calculate_score(random_record(rng))
        assert Decimal("0") <= score <= Decimal("1")

        level = scorer.risk_level_for(score)
        if score >= Decimal("0.7"):
            assert level == RiskLevel.LOW
        elif score >= Decimal("0.4"):
            assert level == RiskLevel.MEDIUM
        else:
            assert level == RiskLevel.HIGH
