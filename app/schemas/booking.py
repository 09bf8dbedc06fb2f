"""Booking-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    A ``scheduled_at`` without an offset is read as local time in the
    configured display timezone.
    """

    scheduled_at: datetime
    service_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("service_name")
    @classmethod
    def strip_service_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("service_name must not be blank")
        return v


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    scheduled_at: datetime
    service_name: str

    # Status
    status: str
    cancelled_at: datetime | None

    # Timestamps
    created_at: datetime
    updated_at: datetime


class BookingView(BookingResponse):
    """Booking with its schedule rendered in the display timezone."""

    formatted_schedule: str


class BookingActionResponse(BaseModel):
    """Result of a cancel or delete."""

    message: str
    booking: BookingResponse
