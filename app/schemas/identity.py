"""Identity collaborator schemas."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_DISPLAY_NAME = "User"


class VerifiedIdentity(BaseModel):
    """A user resolved from a bearer token by the identity service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    owner_id: str = Field(..., min_length=1, validation_alias=AliasChoices("owner_id", "_id", "id"))
    display_name: str = Field(
        default=DEFAULT_DISPLAY_NAME,
        validation_alias=AliasChoices("display_name", "nombre", "name"),
    )
    contact_address: str | None = Field(
        default=None,
        validation_alias=AliasChoices("contact_address", "email"),
    )

    @field_validator("owner_id", mode="before")
    @classmethod
    def coerce_owner_id(cls, v: Any) -> Any:
        # Some identity backends return numeric ids
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("display_name", mode="before")
    @classmethod
    def default_display_name(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_DISPLAY_NAME
        return v
