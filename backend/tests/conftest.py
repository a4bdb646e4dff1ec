"""Shared fixtures: in-memory database, sessions and applicant records."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bizscore.db.base import Base
from bizscore.models import domain  # noqa: F401  registers the tables
from bizscore.models.schemas.scoring import ApplicantRecord


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def strong_record():
    """Applicant that earns every fallback bonus."""
    return ApplicantRecord(
        company_name="Acme Manufacturing",
        tax_id="7701234567",
        business_type="LLC",
        years_in_business=8,
        annual_revenue=2_000_000,
        employee_count=20,
        requested_amount=500_000,
        has_existing_loans=False,
        industry="Manufacturing",
        credit_history=5,
    )


@pytest.fixture
def weak_record():
    """Young, small applicant with existing loans."""
    return ApplicantRecord(
        company_name="Tiny Startup",
        tax_id="5009876543",
        years_in_business=1,
        annual_revenue=50_000,
        employee_count=2,
        requested_amount=100_000,
        has_existing_loans=True,
        industry="Retail",
        credit_history=0,
    )
