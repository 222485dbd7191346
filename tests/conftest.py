"""
Shared test fixtures.

Uses a throwaway SQLite database file per test (via aiosqlite) so tests
run without Docker / PostgreSQL / Redis.  A file rather than ``:memory:``
lets several connections open concurrently and race on the same rows.
"""

import os

# Must be set before ``src`` is imported: the rate limiter reads them at import.
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.infrastructure.database import Database
from src.infrastructure.models import BookingModel, RideModel, UserModel
from src.infrastructure.repositories import RideRepository, UserRepository
from src.services.booking_engine import BookingEngine
from src.services.ride_service import RideService


# ── Helpers ───────────────────────────────────────────────────────────


async def make_user(db: Database, name: str, email: str) -> UserModel:
    async with db.session_factory() as session:
        user = await UserRepository(session).create(name=name, email=email)
        await session.commit()
        return user


async def make_ride(
    db: Database,
    owner_id: int,
    *,
    seats: int = 3,
    fare_per_seat: int = 100,
    source: str = "Pune",
    destination: str = "Mumbai",
) -> RideModel:
    async with db.session_factory() as session:
        ride = await RideRepository(session).create_ride(
            owner_id=owner_id,
            source=source,
            destination=destination,
            seats=seats,
            fare_per_seat=fare_per_seat,
        )
        await session.commit()
        return ride


async def fetch_ride(db: Database, ride_id: int) -> RideModel:
    async with db.session_factory() as session:
        return await session.get(RideModel, ride_id)


async def ride_seats(db: Database, ride_id: int) -> int:
    return (await fetch_ride(db, ride_id)).seats


async def bookings_for_ride(db: Database, ride_id: int) -> list[BookingModel]:
    async with db.session_factory() as session:
        result = await session.execute(
            select(BookingModel).where(BookingModel.ride_id == ride_id)
        )
        return list(result.scalars().all())


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'rideshare.db'}",
        redis_enabled=False,
        rate_limit_enabled=False,
        auto_create_schema=True,
    )


@pytest_asyncio.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Create tables, yield the database, then release the pool."""
    db = Database(test_settings)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def booking_engine(database: Database) -> BookingEngine:
    return BookingEngine(database.session_factory)


@pytest.fixture
def ride_service(database: Database) -> RideService:
    return RideService(database.session_factory)


@pytest_asyncio.fixture
async def owner(database: Database) -> UserModel:
    return await make_user(database, "Olivia Owner", "owner@example.com")


@pytest_asyncio.fixture
async def rider(database: Database) -> UserModel:
    return await make_user(database, "Riya Rider", "rider@example.com")


@pytest_asyncio.fixture
async def other_rider(database: Database) -> UserModel:
    return await make_user(database, "Omar Other", "other@example.com")


@pytest_asyncio.fixture
async def ride(database: Database, owner: UserModel) -> RideModel:
    """3 seats at 100 per seat."""
    return await make_ride(database, owner.id, seats=3, fare_per_seat=100)
