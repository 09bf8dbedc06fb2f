"""API dependencies for authentication and common operations."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import AuthenticationError
from app.services.booking_service import BookingService

# Security scheme; missing credentials are reported as AuthenticationError
security = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Extract the opaque bearer token; identity is resolved downstream."""
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Token not provided")
    return credentials.credentials


def get_booking_service(request: Request) -> BookingService:
    """The application's booking service."""
    return request.app.state.booking_service
