"""Tests for the identity service client."""

import httpx
import pytest

from app.core.exceptions import AuthenticationError, ExternalServiceError, IdentityNotFoundError
from app.services.identity_service import IdentityService


def make_service(handler) -> IdentityService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return IdentityService(base_url="http://user-service:5003/", http_client=client)


async def test_verify_maps_user_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"_id": "abc123", "nombre": "Ana", "email": "ana@example.com"})

    identity = await make_service(handler).verify("token-1")

    assert seen["url"] == "http://user-service:5003/users/me"
    assert seen["auth"] == "Bearer token-1"
    assert identity.owner_id == "abc123"
    assert identity.display_name == "Ana"
    assert identity.contact_address == "ana@example.com"


async def test_missing_name_defaults_and_numeric_id_is_coerced():
    def handler(request):
        return httpx.Response(200, json={"id": 42, "email": "x@example.com"})

    identity = await make_service(handler).verify("token")

    assert identity.owner_id == "42"
    assert identity.display_name == "User"


@pytest.mark.parametrize("status_code", [401, 403])
async def test_rejected_token(status_code):
    service = make_service(lambda request: httpx.Response(status_code))

    with pytest.raises(AuthenticationError) as exc_info:
        await service.verify("bad")
    assert exc_info.value.status_code == 401


async def test_unknown_user():
    service = make_service(lambda request: httpx.Response(404))

    with pytest.raises(IdentityNotFoundError):
        await service.verify("token")


@pytest.mark.parametrize("status_code", [500, 502, 302])
async def test_unexpected_status_is_service_unavailable(status_code):
    service = make_service(lambda request: httpx.Response(status_code))

    with pytest.raises(ExternalServiceError) as exc_info:
        await service.verify("token")
    assert exc_info.value.status_code == 503


async def test_transport_error_is_service_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalServiceError):
        await make_service(handler).verify("token")


async def test_unusable_body_is_service_unavailable():
    service = make_service(lambda request: httpx.Response(200, json={"email": "no-id@example.com"}))

    with pytest.raises(ExternalServiceError):
        await service.verify("token")


async def test_empty_token_is_rejected_without_a_call():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"_id": "x"})

    with pytest.raises(AuthenticationError):
        await make_service(handler).verify("")
    assert calls == []
