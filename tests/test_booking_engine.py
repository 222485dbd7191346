"""Reservation / release behaviour of the booking engine."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from src.domain.enums import RideStatus
from src.domain.exceptions import (
    AuthorizationError,
    CapacityError,
    NotFoundError,
    StorageFault,
    ValidationError,
)
from src.infrastructure.repositories import BookingRepository, RideRepository
from tests.conftest import bookings_for_ride, fetch_ride, make_ride, ride_seats


class TestReserve:
    @pytest.mark.asyncio
    async def test_books_seats_and_computes_fare(self, booking_engine, database, ride, rider):
        booking = await booking_engine.reserve(ride.id, rider.id, 2)

        assert booking.id is not None
        assert booking.ride_id == ride.id
        assert booking.user_id == rider.id
        assert booking.seats_booked == 2
        assert booking.total_fare == 200
        assert await ride_seats(database, ride.id) == 1

    @pytest.mark.asyncio
    async def test_insufficient_seats_rejected(
        self, booking_engine, database, ride, rider, other_rider
    ):
        await booking_engine.reserve(ride.id, rider.id, 2)

        with pytest.raises(CapacityError):
            await booking_engine.reserve(ride.id, other_rider.id, 2)

        assert await ride_seats(database, ride.id) == 1
        assert len(await bookings_for_ride(database, ride.id)) == 1

    @pytest.mark.asyncio
    async def test_exact_fit_takes_last_seats(self, booking_engine, database, ride, rider):
        await booking_engine.reserve(ride.id, rider.id, 3)
        assert await ride_seats(database, ride.id) == 0

    @pytest.mark.asyncio
    async def test_full_ride_rejects_with_capacity_error(
        self, booking_engine, ride, rider, other_rider
    ):
        await booking_engine.reserve(ride.id, rider.id, 3)
        with pytest.raises(CapacityError):
            await booking_engine.reserve(ride.id, other_rider.id, 1)

    @pytest.mark.asyncio
    async def test_unknown_ride_is_not_found(self, booking_engine, rider):
        with pytest.raises(NotFoundError):
            await booking_engine.reserve(9999, rider.id, 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seats", [0, -1])
    async def test_non_positive_seats_rejected(
        self, booking_engine, database, ride, rider, seats
    ):
        with pytest.raises(ValidationError):
            await booking_engine.reserve(ride.id, rider.id, seats)
        assert await ride_seats(database, ride.id) == 3

    @pytest.mark.asyncio
    async def test_cancelled_ride_is_not_found(
        self, booking_engine, ride_service, database, ride, owner, rider
    ):
        await ride_service.cancel(ride.id, owner.id)

        with pytest.raises(NotFoundError):
            await booking_engine.reserve(ride.id, rider.id, 1)
        assert await bookings_for_ride(database, ride.id) == []

    @pytest.mark.asyncio
    async def test_fare_uses_ride_fare_per_seat(self, booking_engine, database, owner, rider):
        ride = await make_ride(database, owner.id, seats=4, fare_per_seat=275)
        booking = await booking_engine.reserve(ride.id, rider.id, 3)
        assert booking.total_fare == 825


class TestRelease:
    @pytest.mark.asyncio
    async def test_restores_seats_and_deletes_booking(
        self, booking_engine, database, ride, rider
    ):
        booking = await booking_engine.reserve(ride.id, rider.id, 2)

        await booking_engine.release(booking.id, rider.id)

        assert await ride_seats(database, ride.id) == 3
        assert await bookings_for_ride(database, ride.id) == []

    @pytest.mark.asyncio
    async def test_other_user_cannot_release(
        self, booking_engine, database, ride, rider, other_rider
    ):
        booking = await booking_engine.reserve(ride.id, rider.id, 2)

        with pytest.raises(AuthorizationError):
            await booking_engine.release(booking.id, other_rider.id)

        assert await ride_seats(database, ride.id) == 1
        assert [b.id for b in await bookings_for_ride(database, ride.id)] == [booking.id]

    @pytest.mark.asyncio
    async def test_unknown_booking_is_not_found(self, booking_engine, rider):
        with pytest.raises(NotFoundError):
            await booking_engine.release(9999, rider.id)

    @pytest.mark.asyncio
    async def test_double_release_is_not_found(self, booking_engine, database, ride, rider):
        booking = await booking_engine.reserve(ride.id, rider.id, 1)
        await booking_engine.release(booking.id, rider.id)

        with pytest.raises(NotFoundError):
            await booking_engine.release(booking.id, rider.id)
        assert await ride_seats(database, ride.id) == 3

    @pytest.mark.asyncio
    async def test_seats_restored_on_cancelled_ride(
        self, booking_engine, ride_service, database, ride, owner, rider
    ):
        booking = await booking_engine.reserve(ride.id, rider.id, 2)
        await ride_service.cancel(ride.id, owner.id)

        await booking_engine.release(booking.id, rider.id)

        stored = await fetch_ride(database, ride.id)
        assert stored.seats == 3
        assert stored.status == RideStatus.CANCELLED
        with pytest.raises(NotFoundError):
            await booking_engine.reserve(ride.id, rider.id, 1)


class TestConservation:
    @pytest.mark.asyncio
    async def test_round_trip_restores_exact_seat_count(
        self, booking_engine, database, ride, rider, other_rider
    ):
        await booking_engine.reserve(ride.id, other_rider.id, 1)
        before = await ride_seats(database, ride.id)

        booking = await booking_engine.reserve(ride.id, rider.id, 2)
        await booking_engine.release(booking.id, rider.id)

        assert await ride_seats(database, ride.id) == before

    @pytest.mark.asyncio
    async def test_capacity_minus_seats_equals_booked(
        self, booking_engine, database, owner, rider, other_rider
    ):
        ride = await make_ride(database, owner.id, seats=6, fare_per_seat=50)

        first = await booking_engine.reserve(ride.id, rider.id, 2)
        await booking_engine.reserve(ride.id, other_rider.id, 3)
        with pytest.raises(CapacityError):
            await booking_engine.reserve(ride.id, rider.id, 2)
        await booking_engine.release(first.id, rider.id)
        await booking_engine.reserve(ride.id, rider.id, 1)

        stored = await fetch_ride(database, ride.id)
        booked = sum(b.seats_booked for b in await bookings_for_ride(database, ride.id))
        assert stored.seats >= 0
        assert stored.capacity - stored.seats == booked == 4


class TestStorageFaults:
    @pytest.mark.asyncio
    async def test_insert_failure_rolls_back_seat_decrement(
        self, booking_engine, database, ride, rider, monkeypatch
    ):
        async def failing_insert(self, **kwargs):
            raise OperationalError("INSERT INTO bookings", {}, Exception("disk I/O error"))

        monkeypatch.setattr(BookingRepository, "insert", failing_insert)

        with pytest.raises(StorageFault) as excinfo:
            await booking_engine.reserve(ride.id, rider.id, 2)

        assert isinstance(excinfo.value.__cause__, OperationalError)
        assert await ride_seats(database, ride.id) == 3
        assert await bookings_for_ride(database, ride.id) == []

    @pytest.mark.asyncio
    async def test_restore_failure_keeps_booking(
        self, booking_engine, database, ride, rider, monkeypatch
    ):
        booking = await booking_engine.reserve(ride.id, rider.id, 2)

        async def failing_increment(self, ride_id, seats):
            raise OperationalError("UPDATE rides", {}, Exception("connection lost"))

        monkeypatch.setattr(RideRepository, "increment_seats", failing_increment)

        with pytest.raises(StorageFault):
            await booking_engine.release(booking.id, rider.id)

        assert await ride_seats(database, ride.id) == 1
        assert [b.id for b in await bookings_for_ride(database, ride.id)] == [booking.id]
