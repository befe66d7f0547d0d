"""Pytest configuration and fixtures."""

import os

# Must be set before app.config is imported anywhere
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("SCHEDULE_TIMEZONE", "Africa/Nairobi")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models import Base, CharityProfile, User, UserRole, VolunteerProfile
from tests.factories import NAIROBI, make_user

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, sharing the test session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def donor(db: AsyncSession) -> User:
    """Create test donor."""
    return await make_user(db, UserRole.DONOR, "Wanjiku Donor")


@pytest_asyncio.fixture
async def charity(db: AsyncSession) -> User:
    """Create test charity with its profile."""
    user = await make_user(
        db, UserRole.CHARITY, "Hope Shelter", location=NAIROBI, address="Ngong Road, Nairobi"
    )
    db.add(CharityProfile(user_id=user.id, charity_name="Hope Shelter"))
    await db.flush()
    return user


@pytest_asyncio.fixture
async def volunteer(db: AsyncSession) -> User:
    """Create test volunteer located in Nairobi."""
    user = await make_user(db, UserRole.VOLUNTEER, "Otieno Volunteer", location=NAIROBI)
    db.add(VolunteerProfile(user_id=user.id, transportation_mode="motorcycle"))
    await db.flush()
    return user


@pytest_asyncio.fixture
async def volunteer2(db: AsyncSession) -> User:
    """Create second test volunteer with no known location."""
    user = await make_user(db, UserRole.VOLUNTEER, "Akinyi Volunteer")
    db.add(VolunteerProfile(user_id=user.id, transportation_mode="car"))
    await db.flush()
    return user


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> User:
    """Create test admin."""
    return await make_user(db, UserRole.ADMIN, "Site Admin")
