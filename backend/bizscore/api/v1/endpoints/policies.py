"""Risk policy management endpoints."""

import logging
from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.core.enums import PolicyType
from bizscore.core.exceptions import PolicyNotFoundError
from bizscore.deps import enforce_rate_limit, get_session
from bizscore.models.schemas.policy import (
    RiskPolicyCreate,
    RiskPolicyResponse,
    RiskPolicyStatusUpdate,
)
from bizscore.services.policy_service import RiskPolicyService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@router.post(
    "",
    response_model=RiskPolicyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a risk policy",
    description="Create a risk policy with its ordered conditions",
)
async def create_policy(
    policy_data: RiskPolicyCreate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> RiskPolicyResponse:
    """
    Create a new risk policy.

    Conditions are evaluated in list order. Each condition's
    ``logical_operator`` joins it to the next one, and the chain is folded
    left to right: ``A OR B AND C`` means ``(A or B) and C``.

    Example:
    - REJECTION / AUTO_REJECT when annualRevenue LESS_THAN 100000
    - PRIORITY / SET_PRIORITY "HIGH" when requestedAmount GREATER_THAN 5000000
    """
    try:
        service = RiskPolicyService(db)
        policy = await service.create_policy(policy_data)
        return RiskPolicyResponse.model_validate(policy)

    except ValueError as e:
        logger.error(f"Validation error creating policy: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error creating policy: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create policy",
        )


@router.get(
    "",
    response_model=List[RiskPolicyResponse],
    summary="List active policies",
)
async def list_active_policies(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> List[RiskPolicyResponse]:
    """Active policies in evaluation order (ascending priority)."""
    try:
        service = RiskPolicyService(db)
        policies = await service.get_active_policies()
        return [RiskPolicyResponse.model_validate(p) for p in policies]

    except Exception as e:
        logger.error(f"Error listing policies: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list policies",
        )


@router.get(
    "/type/{policy_type}",
    response_model=List[RiskPolicyResponse],
    summary="List active policies of a type",
)
async def list_policies_by_type(
    policy_type: PolicyType,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> List[RiskPolicyResponse]:
    try:
        service = RiskPolicyService(db)
        policies = await service.get_policies_by_type(policy_type)
        return [RiskPolicyResponse.model_validate(p) for p in policies]

    except Exception as e:
        logger.error(f"Error listing {policy_type} policies: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list policies",
        )


@router.patch(
    "/{policy_id}/status",
    response_model=RiskPolicyResponse,
    summary="Activate or deactivate a policy",
)
async def update_policy_status(
    policy_id: UUID,
    update: RiskPolicyStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> RiskPolicyResponse:
    try:
        service = RiskPolicyService(db)
        policy = await service.update_policy_status(policy_id, update.is_active)
        return RiskPolicyResponse.model_validate(policy)

    except PolicyNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error updating policy {policy_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update policy",
        )


@router.delete(
    "/{policy_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a policy",
)
async def delete_policy(
    policy_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete a policy together with its conditions."""
    try:
        service = RiskPolicyService(db)
        await service.delete_policy(policy_id)

    except PolicyNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error deleting policy {policy_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete policy",
        )
