"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.

The seat counter is only ever changed with single conditional UPDATE
statements evaluated by the database, never read-modify-write in Python.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BookingModel, RideModel, UserModel
from src.domain.enums import RideStatus


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, *, name: str, email: str) -> UserModel:
        user = UserModel(name=name, email=email)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_ride(
        self,
        *,
        owner_id: int,
        source: str,
        destination: str,
        seats: int,
        fare_per_seat: int,
    ) -> RideModel:
        ride = RideModel(
            owner_id=owner_id,
            source=source,
            destination=destination,
            seats=seats,
            capacity=seats,
            fare_per_seat=fare_per_seat,
            status=RideStatus.OPEN,
        )
        self.session.add(ride)
        await self.session.flush()
        await self.session.refresh(ride)
        return ride

    async def get_by_id(self, ride_id: int) -> Optional[RideModel]:
        return await self.session.get(RideModel, ride_id)

    async def get_for_update(self, ride_id: int) -> Optional[RideModel]:
        """SELECT ... FOR UPDATE so cancellation and booking serialise per ride."""
        result = await self.session.execute(
            select(RideModel).where(RideModel.id == ride_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def load_for_reservation(self, ride_id: int) -> Optional[RideModel]:
        """Row-locked read of an OPEN ride; ``None`` when missing or cancelled."""
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.id == ride_id, RideModel.status == RideStatus.OPEN)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def decrement_seats(self, ride_id: int, seats: int) -> bool:
        """Take *seats* only if the ride is still OPEN and has them right now."""
        result = await self.session.execute(
            update(RideModel)
            .where(
                RideModel.id == ride_id,
                RideModel.status == RideStatus.OPEN,
                RideModel.seats >= seats,
            )
            .values(seats=RideModel.seats - seats)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def increment_seats(self, ride_id: int, seats: int) -> None:
        await self.session.execute(
            update(RideModel)
            .where(RideModel.id == ride_id)
            .values(seats=RideModel.seats + seats)
            .execution_options(synchronize_session=False)
        )

    async def mark_cancelled(self, ride_id: int) -> bool:
        result = await self.session.execute(
            update(RideModel)
            .where(RideModel.id == ride_id, RideModel.status == RideStatus.OPEN)
            .values(status=RideStatus.CANCELLED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_open(self) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.status == RideStatus.OPEN, RideModel.seats > 0)
            .order_by(RideModel.id.desc())
        )
        return list(result.scalars().all())

    async def search(self, source: str, destination: str) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(
                RideModel.source == source,
                RideModel.destination == destination,
                RideModel.status == RideStatus.OPEN,
                RideModel.seats > 0,
            )
            .order_by(RideModel.id.desc())
        )
        return list(result.scalars().all())

    async def list_by_owner(self, owner_id: int) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.owner_id == owner_id)
            .order_by(RideModel.id.desc())
        )
        return list(result.scalars().all())


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(
        self, *, ride_id: int, user_id: int, seats: int, total_fare: int
    ) -> BookingModel:
        booking = BookingModel(
            ride_id=ride_id,
            user_id=user_id,
            seats_booked=seats,
            total_fare=total_fare,
        )
        self.session.add(booking)
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def get_by_id(self, booking_id: int) -> Optional[BookingModel]:
        return await self.session.get(BookingModel, booking_id)

    async def get_for_update(self, booking_id: int) -> Optional[BookingModel]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.id == booking_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def delete(self, booking_id: int) -> bool:
        result = await self.session.execute(
            delete(BookingModel)
            .where(BookingModel.id == booking_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_by_user(self, user_id: int) -> list[BookingModel]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.id.desc())
        )
        return list(result.scalars().all())

    async def seats_booked_for_ride(self, ride_id: int) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(BookingModel.seats_booked), 0)).where(
                BookingModel.ride_id == ride_id
            )
        )
        return result.scalar() or 0

    async def count_for_ride(self, ride_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(BookingModel)
            .where(BookingModel.ride_id == ride_id)
        )
        return result.scalar() or 0
