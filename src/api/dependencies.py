"""FastAPI dependency injection helpers."""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.services.booking_engine import BookingEngine
from src.services.ride_service import RideService


async def get_db(request: Request) -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with request.app.state.db.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_booking_engine(request: Request) -> BookingEngine:
    return BookingEngine(request.app.state.db.session_factory)


def get_ride_service(request: Request) -> RideService:
    return RideService(request.app.state.db.session_factory)
