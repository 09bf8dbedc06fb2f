"""Identity verification against the user service."""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.core.exceptions import AuthenticationError, ExternalServiceError, IdentityNotFoundError
from app.schemas.identity import VerifiedIdentity

logger = logging.getLogger(__name__)

SERVICE_NAME = "identity"


class IdentityService:
    """Resolves bearer tokens to users via ``GET /users/me``."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize identity service client."""
        self.base_url = (base_url or settings.identity_service_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._http_client = http_client

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

    async def verify(self, token: str) -> VerifiedIdentity:
        """Verify a bearer token.

        Args:
            token: Opaque bearer token supplied by the caller

        Returns:
            VerifiedIdentity: Owner id, display name and contact address

        Raises:
            AuthenticationError: Token rejected (401/403) or missing
            IdentityNotFoundError: Identity service does not know the user (404)
            ExternalServiceError: Identity service unreachable or misbehaving
        """
        if not token:
            raise AuthenticationError("Missing bearer token")

        try:
            response = await self.http_client.get(
                f"{self.base_url}/users/me",
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Identity service request failed: {e!r}")
            raise ExternalServiceError(SERVICE_NAME, e.__class__.__name__) from e

        if response.status_code in (401, 403):
            raise AuthenticationError("User not authenticated or token invalid")
        if response.status_code == 404:
            raise IdentityNotFoundError()
        if response.status_code != 200:
            logger.warning(f"Identity service returned unexpected status {response.status_code}")
            raise ExternalServiceError(SERVICE_NAME, f"status {response.status_code}")

        try:
            return VerifiedIdentity.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.warning(f"Identity service returned an unusable body: {e}")
            raise ExternalServiceError(SERVICE_NAME, "invalid response body") from e


# Singleton instance
identity_service = IdentityService()
