"""Booking lifecycle: verification, store mutation, notification."""

import logging
import uuid
from datetime import datetime

from app.config import settings
from app.core.background_tasks import BackgroundDispatcher, background_dispatcher
from app.core.exceptions import NotFoundError, ValidationError
from app.models.booking import Booking
from app.schemas.booking import BookingView
from app.schemas.identity import VerifiedIdentity
from app.schemas.notification import BookingEvent, BookingNotification
from app.services.booking_store import BookingStore
from app.services.identity_service import IdentityService, identity_service
from app.services.notification_service import NotificationService, notification_service
from app.services.upcoming_bookings import UpcomingBookingsProjector, to_views
from app.utils.datetime_format import NOTIFICATION_FORMAT, format_schedule, get_zone

logger = logging.getLogger(__name__)

SERVICE_NAME_MAX_LENGTH = 255


class BookingService:
    """Externally observable booking operations.

    Every operation resolves the caller's token first; a verification
    failure aborts before the store is touched. Create and cancel schedule a
    notification that runs detached from the request.
    """

    def __init__(
        self,
        store: BookingStore,
        identity: IdentityService | None = None,
        notifier: NotificationService | None = None,
        projector: UpcomingBookingsProjector | None = None,
        dispatcher: BackgroundDispatcher | None = None,
        timezone: str | None = None,
    ) -> None:
        self.store = store
        self.identity = identity or identity_service
        self.notifier = notifier or notification_service
        self.timezone = timezone or settings.display_timezone
        self.projector = projector or UpcomingBookingsProjector(store, timezone=self.timezone)
        self.dispatcher = dispatcher or background_dispatcher

    # ==================== VALIDATION ====================

    def _normalize_schedule(self, scheduled_at: datetime) -> datetime:
        if not isinstance(scheduled_at, datetime):
            raise ValidationError("scheduled_at must be a datetime")
        if scheduled_at.tzinfo is None:
            # Local wall-clock time in the service's timezone
            return scheduled_at.replace(tzinfo=get_zone(self.timezone))
        return scheduled_at

    @staticmethod
    def _normalize_service_name(service_name: str) -> str:
        if not isinstance(service_name, str) or not service_name.strip():
            raise ValidationError("service_name must not be blank")
        service_name = service_name.strip()
        if len(service_name) > SERVICE_NAME_MAX_LENGTH:
            raise ValidationError(
                f"service_name must be at most {SERVICE_NAME_MAX_LENGTH} characters"
            )
        return service_name

    # ==================== NOTIFICATIONS ====================

    def _schedule_notification(
        self,
        event: BookingEvent,
        identity: VerifiedIdentity,
        booking: Booking,
    ) -> None:
        """Dispatch a notification without waiting on it."""
        if not identity.contact_address:
            logger.info(f"No contact address for owner={identity.owner_id}; skipping {event.value} notification")
            return

        try:
            notification = BookingNotification(
                contact_address=identity.contact_address,
                display_name=identity.display_name,
                service_name=booking.service_name,
                formatted_schedule=format_schedule(booking.scheduled_at, self.timezone, NOTIFICATION_FORMAT),
            )
            self.dispatcher.dispatch(
                self.notifier.send(event, notification),
                name=f"notify-{event.value}-{booking.id}",
            )
        except Exception as e:
            logger.error(f"Could not schedule {event.value} notification for booking {booking.id}: {e}")

    # ==================== OPERATIONS ====================

    async def create_booking(self, token: str, scheduled_at: datetime, service_name: str) -> Booking:
        """Create an active booking and notify the owner."""
        identity = await self.identity.verify(token)

        scheduled_at = self._normalize_schedule(scheduled_at)
        service_name = self._normalize_service_name(service_name)

        booking = await self.store.create(identity.owner_id, scheduled_at, service_name)
        logger.info(f"Booking {booking.id} created for owner={identity.owner_id}")

        self._schedule_notification(BookingEvent.CREATED, identity, booking)
        return booking

    async def list_bookings(self, token: str) -> list[BookingView]:
        """All of the caller's bookings, latest schedule first."""
        identity = await self.identity.verify(token)
        bookings = await self.store.list_by_owner(identity.owner_id)
        return to_views(bookings, self.timezone)

    async def list_upcoming(self, token: str) -> list[BookingView]:
        """The caller's next active bookings."""
        identity = await self.identity.verify(token)
        return await self.projector.project(identity.owner_id)

    async def cancel_booking(self, token: str, booking_id: uuid.UUID | str) -> Booking:
        """Cancel a booking, enforce the retention cap, notify the owner.

        Re-cancelling returns the booking unchanged and sends no notification.
        """
        identity = await self.identity.verify(token)

        booking = await self.store.cancel_and_evict(booking_id, identity.owner_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        if not booking.newly_cancelled:
            logger.info(f"Booking {booking.id} was already cancelled; no notification sent")
            return booking

        logger.info(f"Booking {booking.id} cancelled for owner={identity.owner_id}")
        self._schedule_notification(BookingEvent.CANCELLED, identity, booking)
        return booking

    async def delete_booking(self, token: str, booking_id: uuid.UUID | str) -> Booking:
        """Permanently delete one of the caller's bookings."""
        identity = await self.identity.verify(token)

        booking = await self.store.delete_by_id(booking_id, identity.owner_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        logger.info(f"Booking {booking.id} deleted for owner={identity.owner_id}")
        return booking
