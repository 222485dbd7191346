"""
Unit of Work -- one session, one transaction, commit or roll back.

Usage::

    async with UnitOfWork(session_factory) as uow:
        ride = await uow.rides.load_for_reservation(ride_id)
        ...
        await uow.commit()

Leaving the block without ``commit()`` (normally or by exception) rolls
the transaction back.  SQLAlchemy errors surface as ``StorageFault``
only after the rollback has run.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .repositories import BookingRepository, RideRepository, UserRepository
from src.domain.exceptions import StorageFault

logger = logging.getLogger(__name__)


class UnitOfWork:
    users: UserRepository
    rides: RideRepository
    bookings: BookingRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> UnitOfWork:
        self.session = self._session_factory()
        self.users = UserRepository(self.session)
        self.rides = RideRepository(self.session)
        self.bookings = BookingRepository(self.session)
        return self

    def _active_session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError("UnitOfWork used outside its 'async with' block")
        return self.session

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        session = self._active_session()
        try:
            # no-op when commit() already succeeded
            await session.rollback()
        except SQLAlchemyError as rollback_exc:
            if exc is None:
                raise StorageFault("Rollback failed") from rollback_exc
            logger.exception("Rollback failed while handling %r", exc)
        finally:
            await session.close()
            self.session = None

        if isinstance(exc, SQLAlchemyError):
            raise StorageFault(f"Storage operation failed: {exc}") from exc
        return False

    async def commit(self) -> None:
        await self._active_session().commit()
