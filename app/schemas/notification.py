"""Notification collaborator schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BookingEvent(str, Enum):
    """Booking events the notification service is told about."""

    CREATED = "created"
    CANCELLED = "cancelled"


class BookingNotification(BaseModel):
    """Body posted to the notification service.

    Serialised with the field names the notification service expects.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contact_address: str = Field(..., serialization_alias="email")
    display_name: str = Field(..., serialization_alias="nombre")
    service_name: str = Field(..., serialization_alias="servicio")
    formatted_schedule: str = Field(..., serialization_alias="fecha")

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
