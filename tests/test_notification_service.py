"""Tests for the notification service client."""

import json

import httpx
import pytest

from app.core.exceptions import NotificationError
from app.schemas.notification import BookingEvent, BookingNotification
from app.services.notification_service import NotificationService

NOTIFICATION = BookingNotification(
    contact_address="ana@example.com",
    display_name="Ana",
    service_name="Hotel Paradise",
    formatted_schedule="15/03/2026 05:00",
)


def make_service(handler) -> NotificationService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NotificationService(base_url="http://notification-service:5002", http_client=client)


@pytest.mark.parametrize(
    "event, path",
    [
        (BookingEvent.CREATED, "/notify/reserva"),
        (BookingEvent.CANCELLED, "/notify/cancelacion"),
    ],
)
async def test_posts_payload_to_event_path(event, path):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200)

    await make_service(handler).send(event, NOTIFICATION)

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert requests[0].url.path == path
    assert json.loads(requests[0].content) == {
        "email": "ana@example.com",
        "nombre": "Ana",
        "servicio": "Hotel Paradise",
        "fecha": "15/03/2026 05:00",
    }


async def test_error_status_raises_notification_error():
    service = make_service(lambda request: httpx.Response(500))

    with pytest.raises(NotificationError) as exc_info:
        await service.send(BookingEvent.CREATED, NOTIFICATION)
    assert exc_info.value.event == "created"


async def test_transport_error_raises_notification_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NotificationError):
        await make_service(handler).send(BookingEvent.CANCELLED, NOTIFICATION)
