"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations (or with AUTO_CREATE_SCHEMA left on):
    python seed.py

Creates:
  - 8 sample users
  - 6 sample rides published by the first three users
  - a handful of bookings, made through the booking engine so seat
    counters stay consistent
"""

import asyncio

from sqlalchemy import func, select

from src.config import settings
from src.domain.exceptions import CapacityError
from src.infrastructure.database import Database
from src.infrastructure.models import UserModel
from src.infrastructure.repositories import RideRepository, UserRepository
from src.services.booking_engine import BookingEngine


USERS = [
    {"name": "Aarav Sharma", "email": "aarav@example.com"},
    {"name": "Priya Patel", "email": "priya@example.com"},
    {"name": "Rohan Mehta", "email": "rohan@example.com"},
    {"name": "Sneha Gupta", "email": "sneha@example.com"},
    {"name": "Vikram Singh", "email": "vikram@example.com"},
    {"name": "Ananya Reddy", "email": "ananya@example.com"},
    {"name": "Karan Joshi", "email": "karan@example.com"},
    {"name": "Meera Nair", "email": "meera@example.com"},
]

# owner index into USERS
RIDES = [
    {"owner": 0, "source": "Pune", "destination": "Mumbai", "seats": 3, "fare": 450},
    {"owner": 0, "source": "Mumbai", "destination": "Pune", "seats": 4, "fare": 400},
    {"owner": 1, "source": "Bengaluru", "destination": "Mysuru", "seats": 2, "fare": 300},
    {"owner": 1, "source": "Pune", "destination": "Mumbai", "seats": 4, "fare": 500},
    {"owner": 2, "source": "Delhi", "destination": "Jaipur", "seats": 3, "fare": 650},
    {"owner": 2, "source": "Chennai", "destination": "Puducherry", "seats": 1, "fare": 350},
]

# (rider index, ride index, seats)
BOOKINGS = [
    (3, 0, 2),
    (4, 0, 1),
    (5, 2, 1),
    (6, 4, 2),
    (7, 5, 1),
    (7, 0, 1),  # ride 0 is full by now; rejected
]


async def seed(db: Database):
    async with db.session_factory() as session:
        # Check if already seeded
        result = await session.execute(select(func.count()).select_from(UserModel))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        user_repo = UserRepository(session)
        users = [await user_repo.create(**u) for u in USERS]
        print(f"  Created {len(users)} users")

        # ── Rides ─────────────────────────────────────────────────────
        ride_repo = RideRepository(session)
        rides = []
        for r in RIDES:
            ride = await ride_repo.create_ride(
                owner_id=users[r["owner"]].id,
                source=r["source"],
                destination=r["destination"],
                seats=r["seats"],
                fare_per_seat=r["fare"],
            )
            rides.append(ride)
        print(f"  Created {len(rides)} rides")

        await session.commit()

    # ── Bookings ──────────────────────────────────────────────────────
    engine = BookingEngine(db.session_factory)
    created = 0
    for rider, ride, seats in BOOKINGS:
        try:
            await engine.reserve(rides[ride].id, users[rider].id, seats)
            created += 1
        except CapacityError as exc:
            print(f"  Skipped booking: {exc.message}")
    print(f"  Created {created} bookings")

    print("\nSeed complete!")


async def main():
    print("Seeding database...")
    db = Database(settings)
    await db.create_schema()
    try:
        await seed(db)
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(main())
