"""
Admin / observability endpoints
===============================

GET /api/v1/admin/rides/{ride_id}/audit -- seat conservation check for a ride
GET /api/v1/admin/health                -- simple health check
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.middleware import limiter
from src.api.schemas import HealthResponse, RideAuditResponse
from src.config import settings
from src.infrastructure.repositories import BookingRepository, RideRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/rides/{ride_id}/audit",
    response_model=RideAuditResponse,
    summary="Check capacity - seats == seats held by bookings",
)
@limiter.limit(settings.rate_limit)
async def audit_ride(
    request: Request,
    ride_id: int,
    db: AsyncSession = Depends(get_db),
):
    ride = await RideRepository(db).get_by_id(ride_id)
    if not ride:
        raise HTTPException(status_code=404, detail="Ride not found")

    booking_repo = BookingRepository(db)
    booked = await booking_repo.seats_booked_for_ride(ride_id)
    return RideAuditResponse(
        ride_id=ride.id,
        status=ride.status,
        capacity=ride.capacity,
        seats=ride.seats,
        seats_booked=booked,
        bookings=await booking_repo.count_for_ride(ride_id),
        consistent=ride.seats >= 0 and ride.capacity - ride.seats == booked,
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
