"""Cancelled-booking retention policy.

An owner keeps at most ``cap`` cancelled bookings. When a cancellation
pushes the count over the cap, the oldest cancellations are evicted:
ordered by ``cancelled_at`` ascending, ties broken by ``id`` ascending.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from app.models.booking import Booking

DEFAULT_RETENTION_CAP = 5

T = TypeVar("T", bound=Booking)


def eviction_sort_key(booking: Booking) -> tuple:
    """Ordering key for the eviction scan (oldest cancellation first)."""
    return (booking.cancelled_at, booking.id)


def sort_oldest_first(bookings: Iterable[T]) -> list[T]:
    """Sort cancelled bookings oldest cancellation first."""
    return sorted(bookings, key=eviction_sort_key)


def select_eviction_targets(cancelled_oldest_first: Sequence[T], cap: int = DEFAULT_RETENTION_CAP) -> list[T]:
    """Return the bookings to delete so at most ``cap`` cancellations remain.

    Args:
        cancelled_oldest_first: The owner's complete cancelled set, already
            sorted oldest first
        cap: Maximum number of cancelled bookings to keep

    Returns:
        list: Prefix of length ``max(0, len - cap)``
    """
    if isinstance(cap, bool) or not isinstance(cap, int) or cap < 0:
        raise ValueError(f"Retention cap must be a non-negative integer, got {cap!r}")

    excess = len(cancelled_oldest_first) - cap
    if excess <= 0:
        return []
    return list(cancelled_oldest_first[:excess])
