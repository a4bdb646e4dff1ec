"""Manual review endpoints for scoring decisions."""

import logging
from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.core.exceptions import (
    DecisionAlreadyResolvedError,
    DecisionNotFoundError,
)
from bizscore.deps import enforce_rate_limit, get_session
from bizscore.models.schemas.scoring import (
    DecisionUpdateRequest,
    ScoringDecisionResponse,
)
from bizscore.services.decision_service import DecisionService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@router.get(
    "/pending",
    response_model=List[ScoringDecisionResponse],
    summary="List pending decisions",
)
async def get_pending_decisions(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> List[ScoringDecisionResponse]:
    """Get all decisions awaiting manual review, newest first."""
    try:
        service = DecisionService(db)
        decisions = await service.get_pending()
        return [ScoringDecisionResponse.model_validate(d) for d in decisions]

    except Exception as e:
        logger.error(f"Error listing pending decisions: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list pending decisions",
        )


@router.get(
    "/pending/priority/{priority}",
    response_model=List[ScoringDecisionResponse],
    summary="List pending decisions by priority",
)
async def get_pending_decisions_by_priority(
    priority: str,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> List[ScoringDecisionResponse]:
    """Get pending decisions with the given priority (e.g. HIGH)."""
    try:
        service = DecisionService(db)
        decisions = await service.get_pending_by_priority(priority)
        return [ScoringDecisionResponse.model_validate(d) for d in decisions]

    except Exception as e:
        logger.error(f"Error listing pending decisions: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list pending decisions",
        )


@router.put(
    "/{decision_id}",
    response_model=ScoringDecisionResponse,
    summary="Resolve a decision",
    description="Record the reviewer's final decision for a pending scoring decision",
)
async def resolve_decision(
    decision_id: UUID,
    update: DecisionUpdateRequest,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoringDecisionResponse:
    """
    Resolve a pending decision.

    A decision can be resolved once; a second attempt returns 409.
    """
    try:
        service = DecisionService(db)
        decision = await service.resolve_review(
            decision_id=decision_id,
            final_decision=update.final_decision,
            manager_notes=update.manager_notes,
            resolved_by=update.resolved_by,
        )
        return ScoringDecisionResponse.model_validate(decision)

    except DecisionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except DecisionAlreadyResolvedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error resolving decision {decision_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve decision",
        )
