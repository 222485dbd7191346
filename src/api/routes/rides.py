"""
Ride endpoints
==============

POST  /api/v1/rides                        -- publish a ride
GET   /api/v1/rides?source=&destination=   -- bookable rides, optionally filtered
GET   /api/v1/rides/{ride_id}              -- fetch one ride
PATCH /api/v1/rides/{ride_id}/cancel       -- owner cancels a ride
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_ride_service
from src.api.middleware import limiter
from src.api.schemas import RideCreateRequest, RideResponse
from src.config import settings
from src.infrastructure.repositories import RideRepository, UserRepository
from src.services.ride_service import RideService

router = APIRouter(prefix="/rides", tags=["rides"])


@router.post(
    "",
    status_code=201,
    response_model=RideResponse,
    summary="Publish a ride",
)
@limiter.limit(settings.rate_limit)
async def publish_ride(
    request: Request,
    body: RideCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    source, destination = body.source.strip(), body.destination.strip()
    if not source or not destination:
        raise HTTPException(status_code=400, detail="source and destination are required")

    if not await UserRepository(db).get_by_id(body.owner_id):
        raise HTTPException(status_code=404, detail="Owner not found")

    return await RideRepository(db).create_ride(
        owner_id=body.owner_id,
        source=source,
        destination=destination,
        seats=body.seats,
        fare_per_seat=body.fare_per_seat,
    )


@router.get(
    "",
    response_model=list[RideResponse],
    summary="List bookable rides",
    description=(
        "OPEN rides with at least one free seat, newest first. "
        "Filtered by route when both source and destination are given."
    ),
)
@limiter.limit(settings.rate_limit)
async def list_rides(
    request: Request,
    source: Optional[str] = None,
    destination: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    repo = RideRepository(db)
    if source and source.strip() and destination and destination.strip():
        return await repo.search(source.strip(), destination.strip())
    return await repo.list_open()


@router.get("/{ride_id}", response_model=RideResponse, summary="Get a ride")
@limiter.limit(settings.rate_limit)
async def get_ride(
    request: Request,
    ride_id: int,
    db: AsyncSession = Depends(get_db),
):
    ride = await RideRepository(db).get_by_id(ride_id)
    if not ride:
        raise HTTPException(status_code=404, detail="Ride not found")
    return ride


@router.patch(
    "/{ride_id}/cancel",
    response_model=RideResponse,
    summary="Cancel a ride",
    description=(
        "Transitions an OPEN ride to CANCELLED. Only the owner may cancel. "
        "Existing bookings are kept; no new bookings are accepted."
    ),
)
@limiter.limit(settings.rate_limit)
async def cancel_ride(
    request: Request,
    ride_id: int,
    owner_id: int = Query(...),
    service: RideService = Depends(get_ride_service),
):
    return await service.cancel(ride_id, owner_id)
