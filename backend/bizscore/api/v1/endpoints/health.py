"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from bizscore.config import settings
from bizscore.deps import get_db, get_score_cache
from bizscore.services.cache import ScoreCache

router = APIRouter()


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    cache: ScoreCache = Depends(get_score_cache),
) -> dict:
    """
    Health check endpoint.

    Verifies that the database is accessible and reports the scoring oracle
    the service is configured against. The oracle itself is not called; its
    outages are absorbed by the fallback scorer.

    Returns:
        dict: Health status with database, oracle and cache details
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "database": db_status,
        "oracle_base_url": settings.ORACLE_BASE_URL,
        "fallback_thresholds": {
            "low": settings.FALLBACK_LOW_THRESHOLD,
            "medium": settings.FALLBACK_MEDIUM_THRESHOLD,
        },
        "cached_entries": len(cache),
    }
