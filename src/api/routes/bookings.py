"""
Booking endpoints
=================

POST   /api/v1/bookings                        -- reserve seats on a ride
DELETE /api/v1/bookings/{booking_id}?user_id=  -- cancel own booking
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_booking_engine, get_db
from src.api.middleware import limiter
from src.api.schemas import BookingCreateRequest, BookingResponse, CancelResponse
from src.config import settings
from src.infrastructure.repositories import UserRepository
from src.services.booking_engine import BookingEngine

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "",
    status_code=201,
    response_model=BookingResponse,
    summary="Book seats on a ride",
    responses={
        404: {"description": "Ride or user not found, or ride cancelled."},
        409: {"description": "Not enough seats."},
    },
)
@limiter.limit(settings.rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    db: AsyncSession = Depends(get_db),
    engine: BookingEngine = Depends(get_booking_engine),
):
    if not await UserRepository(db).get_by_id(body.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return await engine.reserve(body.ride_id, body.user_id, body.seats)


@router.delete(
    "/{booking_id}",
    response_model=CancelResponse,
    summary="Cancel a booking",
    description="Deletes the booking and returns its seats to the ride.",
)
@limiter.limit(settings.rate_limit)
async def cancel_booking(
    request: Request,
    booking_id: int,
    user_id: int = Query(...),
    engine: BookingEngine = Depends(get_booking_engine),
):
    await engine.release(booking_id, user_id)
    return CancelResponse()
