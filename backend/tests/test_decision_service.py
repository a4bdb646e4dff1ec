"""Tests for manual review resolution."""

import uuid

import pytest

from bizscore.core.exceptions import DecisionAlreadyResolvedError, DecisionNotFoundError
from bizscore.repositories.decision_repository import DecisionRepository
from bizscore.repositories.scoring_repository import ScoringRepository
from bizscore.services.decision_service import DecisionService


async def add_decision(db, record, priority="MEDIUM", decision="MANUAL_REVIEW"):
    scoring_request = await ScoringRepository(db).create(
        **record.model_dump(), score=0.5, risk_level="MEDIUM", score_source="FALLBACK"
    )
    created = await DecisionRepository(db).create(
        scoring_request_id=scoring_request.id,
        decision=decision,
        reason="no matching policies",
        priority=priority,
    )
    await db.commit()
    return created


@pytest.mark.asyncio
async def test_resolve_pending_decision(db_session, strong_record):
    decision = await add_decision(db_session, strong_record)

    resolved = await DecisionService(db_session).resolve_review(
        decision.id, "APPROVED", "Looks solid", "manager@bank.test"
    )

    assert resolved.final_decision == "APPROVED"
    assert resolved.manager_notes == "Looks solid"
    assert resolved.resolved_by == "manager@bank.test"
    assert resolved.resolved_at is not None
    # Engine-written fields are untouched
    assert resolved.decision == "MANUAL_REVIEW"
    assert resolved.reason == "no matching policies"


@pytest.mark.asyncio
async def test_resolve_only_once(db_session, strong_record):
    decision = await add_decision(db_session, strong_record)
    service = DecisionService(db_session)
    await service.resolve_review(decision.id, "APPROVED", None, "first")

    with pytest.raises(DecisionAlreadyResolvedError):
        await service.resolve_review(decision.id, "REJECTED", None, "second")


@pytest.mark.asyncio
async def test_resolve_unknown_decision(db_session):
    with pytest.raises(DecisionNotFoundError):
        await DecisionService(db_session).resolve_review(uuid.uuid4(), "APPROVED", None, "x")


@pytest.mark.asyncio
async def test_pending_queue(db_session, strong_record, weak_record):
    high = await add_decision(db_session, weak_record, priority="HIGH")
    medium = await add_decision(db_session, strong_record, priority="MEDIUM")
    service = DecisionService(db_session)

    pending_ids = {d.id for d in await service.get_pending()}
    assert pending_ids == {high.id, medium.id}

    by_priority = await service.get_pending_by_priority("high")
    assert [d.id for d in by_priority] == [high.id]

    await service.resolve_review(high.id, "REJECTED", None, "reviewer")
    assert [d.id for d in await service.get_pending()] == [medium.id]
