"""Core utilities: errors, locking, background dispatch."""

from app.core.background_tasks import BackgroundDispatcher, background_dispatcher
from app.core.exceptions import (
    AppException,
    AuthenticationError,
    ExternalServiceError,
    IdentityNotFoundError,
    NotFoundError,
    NotificationError,
    StorageError,
    ValidationError,
)
from app.core.owner_lock import OwnerLockRegistry, acquire_owner_xact_lock, advisory_lock_key

__all__ = [
    "BackgroundDispatcher",
    "background_dispatcher",
    "AppException",
    "AuthenticationError",
    "ExternalServiceError",
    "IdentityNotFoundError",
    "NotFoundError",
    "NotificationError",
    "StorageError",
    "ValidationError",
    "OwnerLockRegistry",
    "acquire_owner_xact_lock",
    "advisory_lock_key",
]
