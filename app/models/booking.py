"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import CheckConstraint, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.types import UTCDateTime


def utcnow() -> datetime:
    return datetime.now(UTC)


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


class Booking(Base):
    """Booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint(
            "(status = 'cancelled' AND cancelled_at IS NOT NULL) OR "
            "(status = 'active' AND cancelled_at IS NULL)",
            name="ck_bookings_cancelled_at_matches_status",
        ),
        Index("idx_bookings_owner_status", "owner_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    scheduled_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    service_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.ACTIVE.value, index=True
    )  # active, cancelled
    cancelled_at: Mapped[datetime | None] = mapped_column(UTCDateTime)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    # Set by the store on the instance whose cancel it performed; not persisted
    newly_cancelled = False

    def __repr__(self) -> str:
        return f"<Booking id={self.id} owner={self.owner_id} status={self.status}>"
