"""Tests for booking immutability enforcement."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from app.core.immutability import ImmutabilityViolationError
from app.models.booking import Booking
from tests.conftest import OWNER, future


async def load(session_factory, booking_id):
    db = session_factory()
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    return db, result.scalar_one()


async def test_service_name_cannot_change(store, session_factory):
    booking = await store.create(OWNER, future(2), "Hotel")
    db, loaded = await load(session_factory, booking.id)

    loaded.service_name = "Other hotel"
    with pytest.raises(ImmutabilityViolationError) as exc_info:
        await db.commit()
    await db.close()

    assert exc_info.value.field == "service_name"
    assert (await store.get_by_id(booking.id, OWNER)).service_name == "Hotel"


async def test_cancelled_at_is_set_once(store, session_factory):
    booking = await store.create(OWNER, future(2), "Hotel")
    await store.cancel_and_evict(booking.id, OWNER)
    db, loaded = await load(session_factory, booking.id)

    loaded.cancelled_at = datetime(2030, 1, 1, tzinfo=UTC)
    with pytest.raises(ImmutabilityViolationError):
        await db.commit()
    await db.close()


async def test_status_change_is_allowed(store, session_factory):
    booking = await store.create(OWNER, future(2), "Hotel")

    cancelled = await store.cancel_and_evict(booking.id, OWNER)

    assert cancelled.status == "cancelled"
