"""Owner-side ride lifecycle that must not interleave with reservations."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.entities import Ride
from src.domain.enums import RideStatus
from src.domain.exceptions import (
    AuthorizationError,
    InvalidStateTransition,
    NotFoundError,
)
from src.infrastructure.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class RideService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def cancel(self, ride_id: int, owner_id: int) -> Ride:
        """
        Move an OPEN ride to CANCELLED.

        Takes the same row lock as ``BookingEngine.reserve`` and the status
        write is conditioned on ``status = 'OPEN'``, so a reservation either
        completes before the cancellation or sees the ride as cancelled.
        Existing bookings are kept.
        """
        async with UnitOfWork(self._session_factory) as uow:
            row = await uow.rides.get_for_update(ride_id)
            if row is None:
                raise NotFoundError("Ride not found")

            ride = Ride.from_model(row)
            if ride.owner_id != owner_id:
                raise AuthorizationError("You can cancel only your own ride")

            ride.transition_to(RideStatus.CANCELLED)
            if not await uow.rides.mark_cancelled(ride_id):
                raise InvalidStateTransition("Ride is no longer open")
            await uow.commit()

        logger.info("Ride %d cancelled by owner %d", ride_id, owner_id)
        return ride
