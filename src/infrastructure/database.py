"""
Async SQLAlchemy engine and session factory.

Uses ``asyncpg`` as the PostgreSQL driver for non-blocking I/O.  The
connection settings are passed in explicitly; nothing here reads the
process-wide ``settings`` object.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.config import Settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class Database:
    """Owns one engine + session factory built from a ``Settings`` object."""

    def __init__(self, settings: Settings):
        options: dict = {"echo": settings.database_echo}
        # SQLite pools do not take sizing options
        if make_url(settings.database_url).get_backend_name() != "sqlite":
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=True,
            )
        self.engine = create_async_engine(settings.database_url, **options)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """Create any missing tables; existing tables are left alone."""
        from . import models  # noqa: F401  (registers tables on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
