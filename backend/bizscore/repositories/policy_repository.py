"""Repository for risk policies and their conditions."""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bizscore.core.enums import PolicyType
from bizscore.models.domain.policy import PolicyCondition, RiskPolicy
from bizscore.repositories.base import BaseRepository

# Policy types consulted during scoring
EVALUATED_POLICY_TYPES = (
    PolicyType.APPROVAL,
    PolicyType.REJECTION,
    PolicyType.ESCALATION,
    PolicyType.PRIORITY,
)


class PolicyRepository(BaseRepository[RiskPolicy]):
    """
    Repository for RiskPolicy with condition eager loading.

    Conditions are always loaded in position order so the policy evaluator
    sees them exactly as the administrator defined them.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the policy repository.

        Args:
            db: Async database session
        """
        super().__init__(RiskPolicy, db)

    async def create_with_conditions(
        self,
        conditions: Sequence[dict],
        **policy_fields,
    ) -> RiskPolicy:
        """
        Create a policy together with its ordered conditions.

        Args:
            conditions: Condition field dicts, in evaluation order
            **policy_fields: RiskPolicy column values

        Returns:
            The created policy with conditions loaded
        """
        policy = RiskPolicy(**policy_fields)
        policy.conditions = [
            PolicyCondition(position=index, **condition)
            for index, condition in enumerate(conditions)
        ]
        self.db.add(policy)
        await self.db.flush()
        return await self.get_by_id_with_conditions(policy.id)

    async def get_by_id_with_conditions(self, id: UUID) -> Optional[RiskPolicy]:
        """
        Retrieve a policy by ID with its conditions eagerly loaded.

        Args:
            id: The UUID of the policy

        Returns:
            The policy, or None if not found
        """
        stmt = (
            select(RiskPolicy)
            .where(RiskPolicy.id == id)
            .options(selectinload(RiskPolicy.conditions))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_policies_by_types(
        self,
        policy_types: Sequence[PolicyType] = EVALUATED_POLICY_TYPES,
    ) -> List[RiskPolicy]:
        """
        Get active policies of the given types in evaluation order.

        Ordered by ascending priority; ties keep creation order.

        Args:
            policy_types: Policy types to include

        Returns:
            List of active policies with conditions loaded
        """
        stmt = (
            select(RiskPolicy)
            .where(RiskPolicy.is_active.is_(True))
            .where(RiskPolicy.policy_type.in_([t.value for t in policy_types]))
            .options(selectinload(RiskPolicy.conditions))
            .order_by(RiskPolicy.priority.asc(), RiskPolicy.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_active_policies(self) -> List[RiskPolicy]:
        """
        Get all active policies ordered by priority.

        Returns:
            List of active policies with conditions loaded
        """
        stmt = (
            select(RiskPolicy)
            .where(RiskPolicy.is_active.is_(True))
            .options(selectinload(RiskPolicy.conditions))
            .order_by(RiskPolicy.priority.asc(), RiskPolicy.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_active_by_type(self, policy_type: PolicyType) -> List[RiskPolicy]:
        """
        Get active policies of a single type.

        Args:
            policy_type: The policy type to filter on

        Returns:
            List of active policies of that type ordered by priority
        """
        return await self.get_active_policies_by_types([policy_type])

    async def update_status(self, id: UUID, is_active: bool) -> Optional[RiskPolicy]:
        """
        Activate or deactivate a policy.

        Args:
            id: The UUID of the policy
            is_active: New active flag

        Returns:
            The updated policy, or None if not found
        """
        policy = await self.get_by_id_with_conditions(id)
        if not policy:
            return None

        policy.is_active = is_active
        await self.db.flush()
        return await self.get_by_id_with_conditions(id)

    async def delete_policy(self, id: UUID) -> bool:
        """
        Delete a policy and, through the cascade, its conditions.

        Args:
            id: The UUID of the policy

        Returns:
            True if the policy was deleted, False if not found
        """
        policy = await self.get_by_id_with_conditions(id)
        if not policy:
            return False

        await self.db.delete(policy)
        await self.db.flush()
        return True
