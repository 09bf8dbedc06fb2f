"""Shared fixtures: a file-backed SQLite database per test and fake collaborators."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from app.core.background_tasks import BackgroundDispatcher  # noqa: E402
from app.core.exceptions import AuthenticationError, NotificationError  # noqa: E402
from app.core.immutability import register_immutability_enforcement  # noqa: E402
from app.database import create_engine, create_session_factory, init_db  # noqa: E402
from app.schemas.identity import VerifiedIdentity  # noqa: E402
from app.services.booking_service import BookingService  # noqa: E402
from app.services.booking_store import BookingStore  # noqa: E402

register_immutability_enforcement()

OWNER = "user-123"
OTHER_OWNER = "user-456"
TOKEN = "valid-token"
OTHER_TOKEN = "other-token"


class StepClock:
    """Strictly increasing UTC clock; every call advances by ``step``."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime.now(UTC)
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


class FakeIdentityService:
    """Resolves a fixed set of tokens."""

    def __init__(self, identities: dict[str, VerifiedIdentity]):
        self.identities = identities
        self.calls: list[str] = []

    async def verify(self, token: str) -> VerifiedIdentity:
        self.calls.append(token)
        if token not in self.identities:
            raise AuthenticationError("User not authenticated or token invalid")
        return self.identities[token]


class RecordingNotifier:
    """Records every delivery attempt; optionally fails after recording."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, event, notification) -> None:
        self.sent.append((event, notification))
        if self.fail:
            raise NotificationError(event.value, "mail server unavailable")


@pytest.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'bookings.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(session_factory, clock):
    return BookingStore(session_factory, retention_cap=5, clock=clock)


@pytest.fixture
def identity():
    return FakeIdentityService({
        TOKEN: VerifiedIdentity(owner_id=OWNER, display_name="Ana", contact_address="ana@example.com"),
        OTHER_TOKEN: VerifiedIdentity(owner_id=OTHER_OWNER, display_name="Luis", contact_address="luis@example.com"),
    })


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def dispatcher():
    return BackgroundDispatcher()


@pytest.fixture
def booking_service(store, identity, notifier, dispatcher):
    return BookingService(
        store,
        identity=identity,
        notifier=notifier,
        dispatcher=dispatcher,
        timezone="America/Guayaquil",
    )


def future(days: int = 1, clock: StepClock | None = None) -> datetime:
    base = clock.current if clock else datetime.now(UTC)
    return base + timedelta(days=days)
