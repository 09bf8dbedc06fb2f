"""Booking notifications via the notification service.

Delivery is best-effort: the booking is already committed when a
notification is sent, so failures are reported as ``NotificationError`` to
the background dispatcher and never reach API callers.
"""

import logging

import httpx

from app.config import settings
from app.core.exceptions import NotificationError
from app.schemas.notification import BookingEvent, BookingNotification

logger = logging.getLogger(__name__)


class NotificationService:
    """Client for the notification service."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize notification service client."""
        self.base_url = (base_url or settings.notification_service_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._http_client = http_client
        self.paths = {
            BookingEvent.CREATED: settings.notification_created_path,
            BookingEvent.CANCELLED: settings.notification_cancelled_path,
        }

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()

    async def send(self, event: BookingEvent, notification: BookingNotification) -> None:
        """Post a booking event to the notification service.

        Raises:
            NotificationError: Delivery failed for any reason
        """
        url = f"{self.base_url}{self.paths[event]}"
        try:
            response = await self.http_client.post(url, json=notification.to_payload())
        except httpx.HTTPError as e:
            raise NotificationError(event.value, repr(e)) from e

        if response.status_code >= 400:
            raise NotificationError(event.value, f"status {response.status_code}")

        logger.debug(f"Notification '{event.value}' delivered to {notification.contact_address}")


# Singleton instance
notification_service = NotificationService()
