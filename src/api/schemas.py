"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.enums import RideStatus


# ── Requests ──────────────────────────────────────────────────────────


class UserRegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=150)


class RideCreateRequest(BaseModel):
    owner_id: int = Field(..., ge=1)
    source: str = Field(..., min_length=1, max_length=80)
    destination: str = Field(..., min_length=1, max_length=80)
    seats: int = Field(..., ge=1)
    fare_per_seat: int = Field(..., ge=1, description="Integer currency units.")


class BookingCreateRequest(BaseModel):
    ride_id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    seats: int = Field(..., ge=1)


# ── Responses ─────────────────────────────────────────────────────────


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RideResponse(BaseModel):
    id: int
    owner_id: int
    source: str
    destination: str
    seats: int
    capacity: int
    fare_per_seat: int
    status: RideStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    ride_id: int
    user_id: int
    seats_booked: int
    total_fare: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CancelResponse(BaseModel):
    cancelled: bool = True


class RideAuditResponse(BaseModel):
    ride_id: int
    status: RideStatus
    capacity: int
    seats: int
    seats_booked: int
    bookings: int
    consistent: bool


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
