"""
Domain entities with business logic.

Entities are detached snapshots handed across the service boundary, so
callers never hold a live ORM row after its session has closed.

Patterns used
-------------
- **State Pattern** on ``Ride``: enforces valid lifecycle transitions
  (OPEN -> CANCELLED).
- ``Ride.fare_for`` owns the fare rule (integer units, no rounding).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import RIDE_TRANSITIONS, RideStatus
from .exceptions import InvalidStateTransition


@dataclass
class Ride:
    id: Optional[int] = None
    owner_id: int = 0
    source: str = ""
    destination: str = ""
    seats: int = 0
    capacity: int = 0
    fare_per_seat: int = 0
    status: RideStatus = RideStatus.OPEN
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model) -> Ride:
        return cls(
            id=model.id,
            owner_id=model.owner_id,
            source=model.source,
            destination=model.destination,
            seats=model.seats,
            capacity=model.capacity,
            fare_per_seat=model.fare_per_seat,
            status=RideStatus(model.status),
            created_at=model.created_at,
        )

    def fare_for(self, seats: int) -> int:
        return seats * self.fare_per_seat

    def transition_to(self, new_status: RideStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = RIDE_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status


@dataclass(frozen=True)
class Booking:
    id: int
    ride_id: int
    user_id: int
    seats_booked: int
    total_fare: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model) -> Booking:
        return cls(
            id=model.id,
            ride_id=model.ride_id,
            user_id=model.user_id,
            seats_booked=model.seats_booked,
            total_fare=model.total_fare,
            created_at=model.created_at,
        )
