"""API v1 router configuration."""

from fastapi import APIRouter

from bizscore.api.v1.endpoints import decisions, health, policies, scoring

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    health.router,
    tags=["health"],
)

api_router.include_router(
    scoring.router,
    prefix="/scoring",
    tags=["scoring"],
)

api_router.include_router(
    decisions.router,
    prefix="/decisions",
    tags=["decisions"],
)

api_router.include_router(
    policies.router,
    prefix="/policies",
    tags=["policies"],
)
