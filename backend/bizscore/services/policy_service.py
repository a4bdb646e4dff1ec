"""Risk policy service for policy administration."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.core.enums import PolicyType
from bizscore.core.exceptions import PolicyNotFoundError
from bizscore.models.domain.policy import RiskPolicy
from bizscore.models.schemas.policy import RiskPolicyCreate
from bizscore.repositories.policy_repository import PolicyRepository

logger = logging.getLogger(__name__)


class RiskPolicyService:
    """
    Risk policy service for creating, listing and toggling policies.

    Policies take effect on the next scoring attempt; nothing is cached.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the risk policy service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = PolicyRepository(db)

    async def create_policy(self, policy_data: RiskPolicyCreate) -> RiskPolicy:
        """
        Create a policy with its ordered conditions.

        Args:
            policy_data: Validated policy definition

        Returns:
            Created policy with conditions loaded
        """
        data = policy_data.model_dump(mode="json", exclude={"conditions"})
        conditions = [
            condition.model_dump(mode="json") for condition in policy_data.conditions
        ]

        policy = await self.repo.create_with_conditions(conditions, **data)
        await self.db.commit()

        logger.info(
            f"Created risk policy '{policy.name}' ({policy.policy_type}/{policy.action}) "
            f"with {len(conditions)} conditions"
        )
        return policy

    async def get_policy(self, policy_id: UUID) -> RiskPolicy:
        """
        Get a policy by id.

        Raises:
            PolicyNotFoundError: If no policy has this id
        """
        policy = await self.repo.get_by_id_with_conditions(policy_id)
        if not policy:
            raise PolicyNotFoundError(f"Risk policy {policy_id} not found")
        return policy

    async def get_active_policies(self) -> List[RiskPolicy]:
        """Active policies in evaluation order."""
        return await self.repo.get_active_policies()

    async def get_policies_by_type(self, policy_type: PolicyType) -> List[RiskPolicy]:
        """Active policies of one type in evaluation order."""
        return await self.repo.get_active_by_type(policy_type)

    async def update_policy_status(self, policy_id: UUID, is_active: bool) -> RiskPolicy:
        """
        Activate or deactivate a policy.

        Raises:
            PolicyNotFoundError: If no policy has this id
        """
        policy = await self.repo.update_status(policy_id, is_active)
        if not policy:
            raise PolicyNotFoundError(f"Risk policy {policy_id} not found")

        await self.db.commit()
        logger.info(f"Risk policy '{policy.name}' is_active={is_active}")
        return policy

    async def delete_policy(self, policy_id: UUID) -> None:
        """
        Delete a policy and its conditions.

        Raises:
            PolicyNotFoundError: If no policy has this id
        """
        deleted = await self.repo.delete_policy(policy_id)
        if not deleted:
            raise PolicyNotFoundError(f"Risk policy {policy_id} not found")

        await self.db.commit()
        logger.info(f"Deleted risk policy {policy_id}")
