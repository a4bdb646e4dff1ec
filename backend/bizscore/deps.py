"""Dependency injection for FastAPI endpoints."""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.config import settings
from bizscore.core.exceptions import RateLimitExceededError
from bizscore.db.session import get_db, get_session_factory
from bizscore.services.batch_service import BatchScoringService
from bizscore.services.cache import ScoreCache
from bizscore.services.rate_limit import RateLimiter
from bizscore.services.scoring.oracle_client import ScoreOracleClient
from bizscore.services.scoring_service import ScoringService

__all__ = [
    "enforce_rate_limit",
    "get_batch_service",
    "get_db",
    "get_oracle_client",
    "get_rate_limiter",
    "get_score_cache",
    "get_scoring_service",
    "get_session",
]


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session dependency.

    This is an alias for get_db for clarity in endpoint signatures.
    """
    async for session in get_db():
        yield session


def get_oracle_client(request: Request) -> ScoreOracleClient:
    """Shared scoring oracle client created in the application lifespan."""
    return request.app.state.oracle_client


def get_score_cache(request: Request) -> ScoreCache:
    return request.app.state.score_cache


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def client_id_for(request: Request) -> str:
    """Identify the caller by forwarded address, falling back to the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(
    request: Request,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """
    Count the request against the caller's budget.

    Raises:
        HTTPException: 429 with Retry-After when the budget is exhausted
    """
    try:
        limiter.check(client_id_for(request), request.url.path)
    except RateLimitExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
            headers={"Retry-After": str(e.retry_after_seconds)},
        )


async def get_scoring_service(
    db: Annotated[AsyncSession, Depends(get_session)],
    oracle_client: Annotated[ScoreOracleClient, Depends(get_oracle_client)],
    cache: Annotated[ScoreCache, Depends(get_score_cache)],
) -> ScoringService:
    return ScoringService(db, oracle_client, cache, settings)


async def get_batch_service(
    oracle_client: Annotated[ScoreOracleClient, Depends(get_oracle_client)],
    cache: Annotated[ScoreCache, Depends(get_score_cache)],
) -> BatchScoringService:
    return BatchScoringService(get_session_factory(), oracle_client, cache, settings)
