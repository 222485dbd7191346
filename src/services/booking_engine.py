"""
Booking Transaction Engine
==========================

Reserves seats on a ride and releases them again, under concurrent
access from many request handlers competing for the same seat pool.

Concurrency safety
------------------
* **SELECT ... FOR UPDATE** on the ride row inside ``reserve`` (and on the
  booking row inside ``release``) serialises work per ride on databases
  that support row locks.
* The seat decrement is a single conditional UPDATE
  (``seats >= :n AND status = 'OPEN'``) evaluated by the database.  Two
  callers that both passed the earlier capacity read cannot both take the
  last seats: the loser sees zero affected rows and gets ``CapacityError``.
* Decrement + insert (and delete + restore) run inside one ``UnitOfWork``;
  any failure rolls both back.

Nothing is retried here.  A lost race is reported to the caller
immediately; retry policy belongs to the client.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.entities import Booking, Ride
from src.domain.exceptions import (
    AuthorizationError,
    CapacityError,
    NotFoundError,
    ValidationError,
)
from src.infrastructure.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class BookingEngine:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def reserve(
        self, ride_id: int, user_id: int, seats_requested: int
    ) -> Booking:
        """Book *seats_requested* seats on *ride_id* for *user_id*, all or nothing."""
        if seats_requested <= 0:
            raise ValidationError("Seats requested must be greater than zero")

        async with UnitOfWork(self._session_factory) as uow:
            row = await uow.rides.load_for_reservation(ride_id)
            if row is None:
                raise NotFoundError("Ride not available")
            ride = Ride.from_model(row)

            if seats_requested > ride.seats:
                logger.info(
                    "Reservation rejected: ride=%d requested=%d available=%d",
                    ride_id,
                    seats_requested,
                    ride.seats,
                )
                raise CapacityError(
                    f"Not enough seats available. Requested: {seats_requested}, "
                    f"Available: {ride.seats}"
                )

            total_fare = ride.fare_for(seats_requested)

            if not await uow.rides.decrement_seats(ride_id, seats_requested):
                logger.info(
                    "Reservation lost seat race: ride=%d requested=%d",
                    ride_id,
                    seats_requested,
                )
                raise CapacityError("Not enough seats available for booking")

            created = await uow.bookings.insert(
                ride_id=ride_id,
                user_id=user_id,
                seats=seats_requested,
                total_fare=total_fare,
            )
            booking = Booking.from_model(created)
            await uow.commit()

        logger.info(
            "Booking %d confirmed: ride=%d user=%d seats=%d fare=%d",
            booking.id,
            ride_id,
            user_id,
            seats_requested,
            total_fare,
        )
        return booking

    async def release(self, booking_id: int, requesting_user_id: int) -> None:
        """Delete the booking and hand its seats back to the ride, atomically."""
        async with UnitOfWork(self._session_factory) as uow:
            row = await uow.bookings.get_for_update(booking_id)
            if row is None:
                raise NotFoundError("Booking not found")
            booking = Booking.from_model(row)

            if booking.user_id != requesting_user_id:
                raise AuthorizationError("You can cancel only your own booking")

            if not await uow.bookings.delete(booking_id):
                # released concurrently; its seats are already back
                raise NotFoundError("Booking not found")
            # Restored even if the ride has been cancelled since
            await uow.rides.increment_seats(booking.ride_id, booking.seats_booked)
            await uow.commit()

        logger.info(
            "Booking %d released: ride=%d seats_restored=%d",
            booking_id,
            booking.ride_id,
            booking.seats_booked,
        )
