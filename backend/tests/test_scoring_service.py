"""Tests for the scoring service: commit, cache eviction and lookups."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from bizscore.core.enums import RiskLevel, ScoreSource
from bizscore.core.exceptions import InvalidInputError
from bizscore.services.cache import (
    COMPANY_SCORES,
    SCORING_STATS,
    STATS_KEY,
    ScoreCache,
    company_key,
)
from bizscore.services.scoring.result import OracleSuccess, ScoreResult
from bizscore.services.scoring_service import ScoringService


@pytest.fixture
def oracle():
    client = MagicMock()
    client.score = AsyncMock(
        return_value=OracleSuccess(ScoreResult(0.3, RiskLevel.HIGH, ScoreSource.ORACLE))
    )
    return client


@pytest.fixture
def cache():
    return ScoreCache()


@pytest.fixture
def service(db_session, oracle, cache):
    return ScoringService(db_session, oracle, cache)


@pytest.mark.asyncio
async def test_score_accepts_mapping(service, strong_record):
    view = await service.score(strong_record.model_dump())

    assert view.company_name == "Acme Manufacturing"
    assert view.risk_level == RiskLevel.HIGH


@pytest.mark.asyncio
async def test_missing_record_is_invalid_input(service):
    with pytest.raises(InvalidInputError):
        await service.score(None)


@pytest.mark.asyncio
async def test_malformed_record_is_invalid_input(service):
    with pytest.raises(InvalidInputError):
        await service.score({"company_name": "  ", "tax_id": "1"})


@pytest.mark.asyncio
async def test_lookups_are_cached(service, cache, strong_record):
    view = await service.score(strong_record)

    by_id = await service.get_by_id(view.id)
    by_company = await service.get_by_company_and_tax_id(
        strong_record.company_name, strong_record.tax_id
    )

    assert by_id.id == view.id
    assert by_company.id == view.id
    assert cache.get(COMPANY_SCORES, company_key(strong_record.company_name, strong_record.tax_id)) == by_company


@pytest.mark.asyncio
async def test_new_score_evicts_company_and_stats(service, cache, strong_record):
    await service.score(strong_record)
    await service.get_by_company_and_tax_id(strong_record.company_name, strong_record.tax_id)
    stats = await service.get_stats()
    assert stats.total_requests == 1
    assert cache.get(SCORING_STATS, STATS_KEY) is not None

    second = await service.score(strong_record)

    assert cache.get(SCORING_STATS, STATS_KEY) is None
    assert cache.get(
        COMPANY_SCORES, company_key(strong_record.company_name, strong_record.tax_id)
    ) is None
    latest = await service.get_by_company_and_tax_id(
        strong_record.company_name, strong_record.tax_id
    )
    assert latest.id == second.id
    assert (await service.get_stats()).total_requests == 2


@pytest.mark.asyncio
async def test_stats_and_listing(service, oracle, strong_record, weak_record):
    await service.score(strong_record)
    oracle.score.return_value = OracleSuccess(ScoreResult(0.8, RiskLevel.LOW, ScoreSource.ORACLE))
    await service.score(weak_record)

    stats = await service.get_stats()
    assert stats.total_requests == 2
    assert stats.average_score == pytest.approx(0.55)
    assert stats.low_risk_count == 1
    assert stats.high_risk_count == 1
    assert stats.medium_risk_count == 0

    low_only = await service.list_scores(risk_level=RiskLevel.LOW)
    assert low_only.total == 1
    assert [item.company_name for item in low_only.items] == ["Tiny Startup"]

    everything = await service.list_scores(skip=0, limit=1)
    assert everything.total == 2
    assert len(everything.items) == 1


@pytest.mark.asyncio
async def test_enhanced_score_reflects_decision(service, strong_record):
    view = await service.score(strong_record)

    enhanced = await service.get_enhanced_score(view.id)

    assert enhanced.decision_details.id == view.decision_details.id
    assert enhanced.processing_status == view.processing_status


@pytest.mark.asyncio
async def test_unknown_ids(service):
    assert await service.get_by_id(uuid.uuid4()) is None
    assert await service.get_enhanced_score(uuid.uuid4()) is None
    assert await service.get_by_company_and_tax_id("Nobody", "000") is None
