"""Immutability enforcement for booking records using SQLAlchemy events."""

import logging
from datetime import UTC, datetime

from sqlalchemy import event, inspect

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Columns fixed at creation
IMMUTABLE_BOOKING_FIELDS = ("id", "owner_id", "scheduled_at", "service_name", "created_at")


class ImmutabilityViolationError(ValidationError):
    """Raised when attempting to modify an immutable booking field."""

    def __init__(self, model_name: str, field: str, record_id: str):
        self.model_name = model_name
        self.field = field
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot change {model_name}.{field} "
            f"on record {record_id}."
        )


def _log_immutability_violation(model_name: str, field: str, record_id: str) -> None:
    """Log immutability violation for audit purposes."""
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to change {model_name}.{field} "
        f"record_id={record_id} at {datetime.now(UTC).isoformat()}"
    )


def _changed_fields(target) -> list[str]:
    state = inspect(target)
    changed = [
        name for name in IMMUTABLE_BOOKING_FIELDS
        if state.attrs[name].history.has_changes()
    ]
    # cancelled_at may go from NULL to a value once; never change afterwards
    cancelled_history = state.attrs["cancelled_at"].history
    if cancelled_history.has_changes() and any(v is not None for v in cancelled_history.deleted):
        changed.append("cancelled_at")
    return changed


def prevent_booking_mutation(mapper, connection, target) -> None:
    """Reject updates touching immutable booking columns."""
    for field in _changed_fields(target):
        _log_immutability_violation("Booking", field, str(target.id))
        raise ImmutabilityViolationError("Booking", field, str(target.id))


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners for booking immutability.

    Must be called after models are imported but before session use.
    Safe to call more than once.
    """
    from app.models.booking import Booking

    if event.contains(Booking, "before_update", prevent_booking_mutation):
        return

    event.listen(Booking, "before_update", prevent_booking_mutation)
    logger.info("Immutability enforcement registered for booking records")
