"""
SQLAlchemy ORM models.

Tables
------
* ``users``     -- registered riders and ride owners
* ``rides``     -- published rides with a remaining-seat counter
* ``bookings``  -- confirmed seat reservations against a ride

Storage-level guards
--------------------
* ``CHECK (seats >= 0)`` and ``CHECK (seats <= capacity)`` on ``rides`` are
  the last line of defence against overselling; the booking engine's
  conditional UPDATE is expected to never trip them.
* **B-Tree** on ``status``, ``owner_id``, ``(source, destination)``,
  ``bookings.ride_id`` and ``bookings.user_id`` for the listing queries.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)

from .database import Base
from src.domain.enums import RideStatus


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    source = Column(String(80), nullable=False)
    destination = Column(String(80), nullable=False)

    # Remaining seats; only the booking engine changes it
    seats = Column(Integer, nullable=False)
    # Seats at publication time, never mutated
    capacity = Column(Integer, nullable=False)
    fare_per_seat = Column(Integer, nullable=False)
    status = Column(Enum(RideStatus), default=RideStatus.OPEN, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("seats >= 0", name="ck_rides_seats_non_negative"),
        CheckConstraint("seats <= capacity", name="ck_rides_seats_within_capacity"),
        CheckConstraint("capacity > 0", name="ck_rides_capacity_positive"),
        CheckConstraint("fare_per_seat >= 0", name="ck_rides_fare_non_negative"),
        Index("idx_rides_status", "status"),
        Index("idx_rides_owner", "owner_id"),
        Index("idx_rides_route", "source", "destination"),
    )


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    seats_booked = Column(Integer, nullable=False)
    total_fare = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("seats_booked > 0", name="ck_bookings_seats_positive"),
        CheckConstraint("total_fare >= 0", name="ck_bookings_fare_non_negative"),
        Index("idx_bookings_ride", "ride_id"),
        Index("idx_bookings_user", "user_id"),
    )
