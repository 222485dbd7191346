"""
FastAPI application factory.

* Registers routes for users, rides, bookings and admin.
* Creates the schema (if configured) on startup and disposes the engine
  on shutdown via lifespan events.
* Maps domain failures to HTTP status codes.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.errors import register_exception_handlers
from src.api.middleware import limiter
from src.api.routes import admin, bookings, rides, users
from src.config import Settings, settings as default_settings
from src.infrastructure.database import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup; release the pool on shutdown."""
    if app.state.settings.auto_create_schema:
        await app.state.db.create_schema()
        logger.info("Database schema ensured")
    yield
    await app.state.db.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="Rideshare Booking API",
        description=(
            "Owners publish rides with a seat count and fare; riders search "
            "and book seats, and either side can cancel.  Seat reservation "
            "is atomic under concurrent bookings on the same ride."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings)

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Routers
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(rides.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
