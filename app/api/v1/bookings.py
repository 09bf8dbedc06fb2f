"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_bearer_token, get_booking_service
from app.models.booking import Booking
from app.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingResponse,
    BookingView,
)
from app.services.booking_service import BookingService

router = APIRouter()

Token = Annotated[str, Depends(get_bearer_token)]
Service = Annotated[BookingService, Depends(get_booking_service)]


@router.get("/", response_model=list[BookingView])
async def list_bookings(token: Token, service: Service) -> list[BookingView]:
    """List all bookings of the authenticated user."""
    return await service.list_bookings(token)


@router.get("/upcoming", response_model=list[BookingView])
async def list_upcoming_bookings(token: Token, service: Service) -> list[BookingView]:
    """List the next active bookings (scheduled now or later)."""
    return await service.list_upcoming(token)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    token: Token,
    service: Service,
) -> Booking:
    """Create a booking and notify the user."""
    return await service.create_booking(token, booking_data.scheduled_at, booking_data.service_name)


@router.post("/{booking_id}/cancel", response_model=BookingActionResponse)
async def cancel_booking(booking_id: UUID, token: Token, service: Service) -> BookingActionResponse:
    """Cancel a booking; only the five most recent cancellations are kept."""
    booking = await service.cancel_booking(token, booking_id)
    return BookingActionResponse(
        message="Booking cancelled successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.delete("/{booking_id}", response_model=BookingActionResponse)
async def delete_booking(booking_id: UUID, token: Token, service: Service) -> BookingActionResponse:
    """Permanently delete a booking owned by the user."""
    booking = await service.delete_booking(token, booking_id)
    return BookingActionResponse(
        message="Booking deleted successfully",
        booking=BookingResponse.model_validate(booking),
    )
