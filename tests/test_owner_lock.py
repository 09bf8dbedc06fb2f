"""Tests for owner-scoped locking."""

import asyncio
import uuid
from types import SimpleNamespace

from sqlalchemy.dialects import postgresql

from app.core.owner_lock import OwnerLockRegistry, acquire_owner_xact_lock, advisory_lock_key
from app.services.booking_store import BookingStore


class TestAdvisoryLockKey:
    def test_stable_for_same_owner(self):
        assert advisory_lock_key("user-123") == advisory_lock_key("user-123")

    def test_differs_between_owners(self):
        assert advisory_lock_key("user-123") != advisory_lock_key("user-456")

    def test_fits_postgres_bigint(self):
        for owner in ("", "a", "user-123", "ñandú", "x" * 500):
            key = advisory_lock_key(owner)
            assert -(2**63) <= key < 2**63


class TestOwnerLockRegistry:
    async def test_same_owner_is_serialised(self):
        registry = OwnerLockRegistry()
        active = 0
        max_active = 0

        async def critical_section():
            nonlocal active, max_active
            async with registry.hold("user-123"):
                active += 1
                max_active = max(max_active, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(critical_section() for _ in range(6)))

        assert max_active == 1

    async def test_different_owners_do_not_block_each_other(self):
        registry = OwnerLockRegistry()
        entered = asyncio.Event()
        release = asyncio.Event()

        async def hold_first():
            async with registry.hold("user-123"):
                entered.set()
                await release.wait()

        holder = asyncio.create_task(hold_first())
        await entered.wait()

        async with registry.hold("user-456"):
            pass  # would hang if owners shared a lock

        release.set()
        await holder

    async def test_idle_locks_are_dropped(self):
        registry = OwnerLockRegistry()

        async with registry.hold("user-123"):
            assert len(registry) == 1

        assert len(registry) == 0

    async def test_lock_released_on_error(self):
        registry = OwnerLockRegistry()

        try:
            async with registry.hold("user-123"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        async with registry.hold("user-123"):
            pass
        assert len(registry) == 0


async def test_no_advisory_lock_on_sqlite(session_factory):
    async with session_factory() as db:
        assert await acquire_owner_xact_lock(db, "user-123") is False


class EmptyResult:
    def scalar_one_or_none(self):
        return None


class RecordingSession:
    """Session double reporting a given dialect and recording every statement."""

    def __init__(self, dialect: str = "postgresql"):
        self.bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect))
        self.executed = []

    def get_bind(self):
        return self.bind

    def begin(self):
        return self

    async def execute(self, statement, params=None):
        self.executed.append((statement, params))
        return EmptyResult()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


async def test_advisory_lock_on_postgres():
    db = RecordingSession()

    assert await acquire_owner_xact_lock(db, "user-123") is True

    assert len(db.executed) == 1
    statement, params = db.executed[0]
    assert statement.text == "SELECT pg_advisory_xact_lock(:key)"
    assert params == {"key": advisory_lock_key("user-123")}


async def test_cancel_takes_advisory_lock_before_row_lock():
    db = RecordingSession()
    store = BookingStore(lambda: db, retention_cap=5)

    assert await store.cancel_and_evict(uuid.uuid4(), "user-123") is None

    assert len(db.executed) == 2
    (lock_statement, lock_params), (select_statement, _) = db.executed
    assert lock_statement.text == "SELECT pg_advisory_xact_lock(:key)"
    assert lock_params == {"key": advisory_lock_key("user-123")}
    assert "FOR UPDATE" in str(select_statement.compile(dialect=postgresql.dialect()))
