"""
User endpoints
==============

POST /api/v1/users/register             -- register (or return existing by email)
GET  /api/v1/users/login?email=         -- look a user up by email
GET  /api/v1/users/{user_id}            -- fetch a user
GET  /api/v1/users/{user_id}/rides      -- rides published by the user
GET  /api/v1/users/{user_id}/bookings   -- user's bookings, most recent first
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.middleware import limiter
from src.api.schemas import (
    BookingResponse,
    RideResponse,
    UserRegisterRequest,
    UserResponse,
)
from src.config import settings
from src.infrastructure.repositories import (
    BookingRepository,
    RideRepository,
    UserRepository,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/register",
    status_code=201,
    response_model=UserResponse,
    summary="Register a user",
    responses={200: {"description": "Email already registered; existing user returned."}},
)
@limiter.limit(settings.rate_limit)
async def register_user(
    request: Request,
    response: Response,
    body: UserRegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    name, email = body.name.strip(), body.email.strip()
    if not name or not email:
        raise HTTPException(status_code=400, detail="name and email are required")

    repo = UserRepository(db)
    existing = await repo.get_by_email(email)
    if existing:
        response.status_code = 200
        return existing
    return await repo.create(name=name, email=email)


@router.get("/login", response_model=UserResponse, summary="Find a user by email")
@limiter.limit(settings.rate_limit)
async def login_user(
    request: Request,
    email: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).get_by_email(email.strip())
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
@limiter.limit(settings.rate_limit)
async def get_user(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get(
    "/{user_id}/rides",
    response_model=list[RideResponse],
    summary="Rides published by a user",
)
@limiter.limit(settings.rate_limit)
async def list_user_rides(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await RideRepository(db).list_by_owner(user_id)


@router.get(
    "/{user_id}/bookings",
    response_model=list[BookingResponse],
    summary="Bookings made by a user, most recent first",
)
@limiter.limit(settings.rate_limit)
async def list_user_bookings(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await BookingRepository(db).list_by_user(user_id)
