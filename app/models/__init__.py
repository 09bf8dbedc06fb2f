"""Database models."""

from app.models.booking import Booking, BookingStatus

__all__ = [
    "Booking",
    "BookingStatus",
]
