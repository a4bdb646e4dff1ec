"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bizscore.api.v1.router import api_router
from bizscore.config import settings
from bizscore.services.cache import ScoreCache
from bizscore.services.rate_limit import CounterStore, RateLimiter
from bizscore.services.scoring.oracle_client import (
    RetryPolicy,
    ScoreOracleClient,
    create_http_client,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def _cleanup_rate_limits(limiter: RateLimiter, interval: int) -> None:
    while True:
        await asyncio.sleep(interval)
        limiter.cleanup()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create shared clients and caches; close them on shutdown."""
    http_client = create_http_client(settings)
    app.state.oracle_client = ScoreOracleClient(
        http_client,
        settings.ORACLE_BASE_URL,
        RetryPolicy.from_settings(settings),
    )
    app.state.score_cache = ScoreCache(
        max_size=settings.CACHE_MAX_SIZE,
        ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    app.state.rate_limiter = RateLimiter(
        CounterStore(),
        per_minute=settings.RATE_LIMIT_PER_MINUTE,
        per_hour=settings.RATE_LIMIT_PER_HOUR,
    )
    cleanup_task = asyncio.create_task(
        _cleanup_rate_limits(app.state.rate_limiter, settings.RATE_LIMIT_CLEANUP_INTERVAL)
    )
    logger.info(f"BizScore API started (oracle at {settings.ORACLE_BASE_URL})")

    try:
        yield
    finally:
        cleanup_task.cancel()
        await http_client.aclose()
        logger.info("BizScore API stopped")


# Create FastAPI application
app = FastAPI(
    title="BizScore Decision Engine API",
    description="Policy-driven credit scoring and decisioning for business applicants",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router with v1 prefix
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "message": "BizScore Decision Engine API",
        "version": "1.0.0",
        "docs": "/api/docs",
    }
