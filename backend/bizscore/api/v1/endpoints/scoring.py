"""Scoring endpoints: single and batch scoring, lookups and statistics."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bizscore.core.enums import RiskLevel
from bizscore.core.exceptions import InvalidInputError, PersistenceError
from bizscore.deps import enforce_rate_limit, get_batch_service, get_scoring_service
from bizscore.models.schemas.scoring import (
    ApplicantRecord,
    BatchReport,
    BatchScoringRequest,
    DecisionView,
    ScoringListResponse,
    ScoringResponse,
    ScoringStatsResponse,
)
from bizscore.services.batch_service import BatchScoringService
from bizscore.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@router.post(
    "/score",
    response_model=DecisionView,
    status_code=status.HTTP_201_CREATED,
    summary="Score an applicant",
    description="Evaluate risk policies, score the applicant and record the decision",
)
async def calculate_score(
    record: ApplicantRecord,
    service: Annotated[ScoringService, Depends(get_scoring_service)],
) -> DecisionView:
    """
    Score a business applicant.

    The oracle score is used when available; otherwise the deterministic
    fallback score is recorded with ``score_source=FALLBACK``. The response
    carries the automated policy decision and its review priority.
    """
    try:
        return await service.score(record)

    except InvalidInputError as e:
        logger.error(f"Validation error scoring applicant: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except PersistenceError as e:
        logger.error(f"Persistence error scoring applicant: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record scoring attempt",
        )
    except Exception as e:
        logger.error(f"Error scoring applicant: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to score applicant",
        )


@router.post(
    "/batch",
    response_model=BatchReport,
    summary="Score applicants in bulk",
    description="Score many applicants concurrently and report per-item outcomes",
)
async def batch_score(
    request: BatchScoringRequest,
    service: Annotated[BatchScoringService, Depends(get_batch_service)],
) -> BatchReport:
    """Score a batch of applicants. Items that fail are listed in ``failed_results``."""
    try:
        return await service.process_batch(request.requests)

    except InvalidInputError as e:
        logger.error(f"Validation error in batch scoring: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error in batch scoring: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process batch",
        )


@router.get(
    "/scores",
    response_model=ScoringListResponse,
    summary="List scoring results",
    description="Get paginated scoring results, newest first",
)
async def list_scores(
    service: Annotated[ScoringService, Depends(get_scoring_service)],
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    risk_level: Optional[RiskLevel] = Query(None, description="Filter by risk level"),
) -> ScoringListResponse:
    """List scoring results with optional risk-level filtering."""
    try:
        return await service.list_scores(skip=skip, limit=limit, risk_level=risk_level)

    except Exception as e:
        logger.error(f"Error listing scores: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list scores",
        )


@router.get(
    "/scores/company",
    response_model=ScoringResponse,
    summary="Get latest score for a company",
)
async def get_score_by_company(
    service: Annotated[ScoringService, Depends(get_scoring_service)],
    company_name: str = Query(..., min_length=1),
    tax_id: str = Query(..., min_length=1),
) -> ScoringResponse:
    """Get the most recent scoring result for a company and tax id."""
    try:
        response = await service.get_by_company_and_tax_id(company_name, tax_id)

        if not response:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No scoring result for {company_name} ({tax_id})",
            )

        return response

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving company score: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve score",
        )


@router.get(
    "/scores/{scoring_id}",
    response_model=DecisionView,
    summary="Get a scoring result",
    description="Get a scoring result enriched with its current decision",
)
async def get_score(
    scoring_id: UUID,
    service: Annotated[ScoringService, Depends(get_scoring_service)],
) -> DecisionView:
    """Get a scoring result with its decision details."""
    try:
        view = await service.get_enhanced_score(scoring_id)

        if not view:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Scoring result {scoring_id} not found",
            )

        return view

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving score {scoring_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve score",
        )


@router.get(
    "/stats",
    response_model=ScoringStatsResponse,
    summary="Scoring statistics",
)
async def get_stats(
    service: Annotated[ScoringService, Depends(get_scoring_service)],
) -> ScoringStatsResponse:
    """Totals, average score and counts per risk level."""
    try:
        return await service.get_stats()

    except Exception as e:
        logger.error(f"Error computing scoring stats: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute statistics",
        )
