"""Booking state machine."""

from app.models.booking import BookingStatus

BOOKING_TRANSITIONS = {
    BookingStatus.ACTIVE.value: {BookingStatus.CANCELLED.value},
    BookingStatus.CANCELLED.value: set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())

