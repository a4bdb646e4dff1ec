"""Tests for risk policy administration."""

import uuid

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from bizscore.core.enums import PolicyType
from bizscore.core.exceptions import PolicyNotFoundError
from bizscore.models.domain.policy import PolicyCondition
from bizscore.models.schemas.policy import RiskPolicyCreate
from bizscore.services.policy_service import RiskPolicyService


def policy_data(name="small revenue", priority=1, **overrides):
    data = {
        "name": name,
        "policy_type": "REJECTION",
        "priority": priority,
        "action": "AUTO_REJECT",
        "conditions": [
            {"field": "annualRevenue", "operator": "LESS_THAN",
             "numeric_value": 100_000, "logical_operator": "OR"},
            {"field": "industry", "operator": "EQUALS", "value": "gambling"},
        ],
    }
    data.update(overrides)
    return RiskPolicyCreate(**data)


@pytest.mark.asyncio
async def test_create_policy_keeps_condition_order(db_session):
    policy = await RiskPolicyService(db_session).create_policy(policy_data())

    assert policy.policy_type == "REJECTION"
    assert policy.action == "AUTO_REJECT"
    assert [c.field for c in policy.conditions] == ["annualRevenue", "industry"]
    assert [c.position for c in policy.conditions] == [0, 1]
    assert policy.conditions[0].logical_operator == "OR"


@pytest.mark.asyncio
async def test_active_policies_are_priority_ordered(db_session):
    service = RiskPolicyService(db_session)
    await service.create_policy(policy_data("second", priority=5))
    await service.create_policy(policy_data("first", priority=1))
    inactive = await service.create_policy(policy_data("off", priority=0))
    await service.update_policy_status(inactive.id, False)

    names = [p.name for p in await service.get_active_policies()]
    assert names == ["first", "second"]


@pytest.mark.asyncio
async def test_policies_by_type(db_session):
    service = RiskPolicyService(db_session)
    await service.create_policy(policy_data("reject"))
    await service.create_policy(
        policy_data("approve", policy_type="APPROVAL", action="AUTO_APPROVE")
    )

    approvals = await service.get_policies_by_type(PolicyType.APPROVAL)
    assert [p.name for p in approvals] == ["approve"]


@pytest.mark.asyncio
async def test_delete_policy_removes_conditions(db_session):
    service = RiskPolicyService(db_session)
    policy = await service.create_policy(policy_data())

    await service.delete_policy(policy.id)

    with pytest.raises(PolicyNotFoundError):
        await service.get_policy(policy.id)
    remaining = await db_session.execute(select(PolicyCondition))
    assert remaining.scalars().all() == []


@pytest.mark.asyncio
async def test_unknown_policy(db_session):
    service = RiskPolicyService(db_session)
    with pytest.raises(PolicyNotFoundError):
        await service.update_policy_status(uuid.uuid4(), True)
    with pytest.raises(PolicyNotFoundError):
        await service.delete_policy(uuid.uuid4())


def test_set_priority_requires_value():
    with pytest.raises(ValidationError):
        policy_data(policy_type="PRIORITY", action="SET_PRIORITY")


def test_unknown_condition_field_is_rejected():
    with pytest.raises(ValidationError):
        policy_data(conditions=[{"field": "netWorth", "operator": "GREATER_THAN"}])
