"""Booking persistence, including the cancel-and-evict transaction."""

import logging
import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.core.exceptions import StorageError
from app.core.owner_lock import OwnerLockRegistry, acquire_owner_xact_lock
from app.domain.booking_state import can_transition
from app.domain.retention_policy import select_eviction_targets
from app.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)


def _coerce_booking_id(booking_id: uuid.UUID | str) -> uuid.UUID | None:
    """Parse a booking id; malformed ids cannot match any record."""
    if isinstance(booking_id, uuid.UUID):
        return booking_id
    try:
        return uuid.UUID(str(booking_id))
    except ValueError:
        return None


class BookingStore:
    """Durable record of bookings.

    Each operation runs in its own session and transaction. Database errors
    roll the transaction back and surface as ``StorageError``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        retention_cap: int | None = None,
        owner_locks: OwnerLockRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if session_factory is None:
            from app.database import async_session_maker

            session_factory = async_session_maker
        self._session_factory = session_factory
        self.retention_cap = (
            settings.booking_retention_cap if retention_cap is None else retention_cap
        )
        self._owner_locks = owner_locks or OwnerLockRegistry()
        self._clock = clock or (lambda: datetime.now(UTC))

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as db:
            try:
                async with db.begin():
                    yield db
            except SQLAlchemyError as e:
                logger.exception(f"Booking store operation '{operation}' rolled back")
                raise StorageError(operation, e.__class__.__name__) from e

    # ==================== WRITES ====================

    async def create(self, owner_id: str, scheduled_at: datetime, service_name: str) -> Booking:
        """Insert a new active booking."""
        async with self._transaction("create") as db:
            booking = Booking(
                owner_id=owner_id,
                scheduled_at=scheduled_at,
                service_name=service_name,
                status=BookingStatus.ACTIVE.value,
                cancelled_at=None,
            )
            db.add(booking)
            await db.flush()
            return booking

    async def delete_by_id(self, booking_id: uuid.UUID | str, owner_id: str) -> Booking | None:
        """Delete an owner's booking and return the prior record."""
        parsed_id = _coerce_booking_id(booking_id)
        if parsed_id is None:
            return None

        async with self._transaction("delete") as db:
            result = await db.execute(
                select(Booking)
                .where(Booking.id == parsed_id, Booking.owner_id == owner_id)
                .with_for_update()
            )
            booking = result.scalar_one_or_none()
            if booking is None:
                return None
            await db.delete(booking)
            return booking

    async def cancel_and_evict(self, booking_id: uuid.UUID | str, owner_id: str) -> Booking | None:
        """Cancel a booking and evict the owner's oldest excess cancellations.

        The owner's lock is held from the target lookup until commit, so the
        cancelled-set read and the eviction decision cannot interleave with
        another cancellation for the same owner.

        Args:
            booking_id: Booking to cancel
            owner_id: Owner the booking must belong to

        Returns:
            Booking | None: The cancelled booking, or None if the owner has no
            such booking (nothing is modified in that case). ``newly_cancelled``
            is True only when this call performed the transition
        """
        parsed_id = _coerce_booking_id(booking_id)
        if parsed_id is None:
            return None

        async with self._owner_locks.hold(owner_id):
            async with self._transaction("cancel_and_evict") as db:
                await acquire_owner_xact_lock(db, owner_id)

                result = await db.execute(
                    select(Booking)
                    .where(Booking.id == parsed_id, Booking.owner_id == owner_id)
                    .with_for_update()
                )
                booking = result.scalar_one_or_none()
                if booking is None:
                    return None

                # Re-cancelling keeps the original cancelled_at and evicts nothing
                if not can_transition(booking.status, BookingStatus.CANCELLED.value):
                    return booking

                booking.status = BookingStatus.CANCELLED.value
                booking.cancelled_at = self._clock()
                booking.newly_cancelled = True
                await db.flush()

                cancelled = await db.execute(
                    select(Booking)
                    .where(
                        Booking.owner_id == owner_id,
                        Booking.status == BookingStatus.CANCELLED.value,
                    )
                    .order_by(Booking.cancelled_at.asc(), Booking.id.asc())
                )
                targets = select_eviction_targets(list(cancelled.scalars().all()), self.retention_cap)

                if targets:
                    evicted_ids = [b.id for b in targets]
                    await db.execute(delete(Booking).where(Booking.id.in_(evicted_ids)))
                    logger.info(
                        f"Evicted {len(evicted_ids)} cancelled booking(s) for owner={owner_id}: "
                        f"{', '.join(str(i) for i in evicted_ids)}"
                    )

                return booking

    # ==================== READS ====================

    async def get_by_id(self, booking_id: uuid.UUID | str, owner_id: str) -> Booking | None:
        """Look up a booking scoped to its owner."""
        parsed_id = _coerce_booking_id(booking_id)
        if parsed_id is None:
            return None

        async with self._transaction("get") as db:
            result = await db.execute(
                select(Booking).where(Booking.id == parsed_id, Booking.owner_id == owner_id)
            )
            return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: str) -> list[Booking]:
        """All of an owner's bookings, latest schedule first."""
        async with self._transaction("list") as db:
            result = await db.execute(
                select(Booking)
                .where(Booking.owner_id == owner_id)
                .order_by(Booking.scheduled_at.desc(), Booking.id.asc())
            )
            return list(result.scalars().all())

    async def list_upcoming_active(
        self,
        owner_id: str,
        limit: int,
        now: datetime | None = None,
    ) -> list[Booking]:
        """Active bookings scheduled at or after ``now``, soonest first."""
        now = now or self._clock()
        async with self._transaction("list_upcoming") as db:
            result = await db.execute(
                select(Booking)
                .where(
                    Booking.owner_id == owner_id,
                    Booking.status == BookingStatus.ACTIVE.value,
                    Booking.scheduled_at >= now,
                )
                .order_by(Booking.scheduled_at.asc(), Booking.id.asc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def count_cancelled(self, owner_id: str) -> int:
        """Number of cancelled bookings the owner currently keeps."""
        async with self._transaction("count_cancelled") as db:
            result = await db.execute(
                select(func.count())
                .select_from(Booking)
                .where(
                    Booking.owner_id == owner_id,
                    Booking.status == BookingStatus.CANCELLED.value,
                )
            )
            return result.scalar() or 0
