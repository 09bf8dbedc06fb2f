"""Upcoming-bookings read path."""

from collections.abc import Iterable

from app.config import settings
from app.models.booking import Booking
from app.schemas.booking import BookingResponse, BookingView
from app.services.booking_store import BookingStore
from app.utils.datetime_format import LISTING_FORMAT, format_schedule


def to_view(booking: Booking, timezone: str) -> BookingView:
    """Attach the display-formatted schedule to a booking."""
    data = BookingResponse.model_validate(booking).model_dump()
    return BookingView(
        **data,
        formatted_schedule=format_schedule(booking.scheduled_at, timezone, LISTING_FORMAT),
    )


def to_views(bookings: Iterable[Booking], timezone: str) -> list[BookingView]:
    return [to_view(b, timezone) for b in bookings]


class UpcomingBookingsProjector:
    """Next active, future-dated bookings in schedule order."""

    def __init__(
        self,
        store: BookingStore,
        timezone: str | None = None,
        limit: int | None = None,
    ) -> None:
        self.store = store
        self.timezone = timezone or settings.display_timezone
        self.limit = limit or settings.upcoming_limit

    async def project(self, owner_id: str) -> list[BookingView]:
        bookings = await self.store.list_upcoming_active(owner_id, self.limit)
        return to_views(bookings, self.timezone)
