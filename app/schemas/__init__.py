"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingResponse,
    BookingView,
)
from app.schemas.identity import VerifiedIdentity
from app.schemas.notification import BookingEvent, BookingNotification

__all__ = [
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingView",
    "BookingActionResponse",
    # Collaborators
    "VerifiedIdentity",
    "BookingEvent",
    "BookingNotification",
]
