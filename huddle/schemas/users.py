"""Schemas related to user accounts."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, constr


class UserCreate(BaseModel):
    """Payload for creating a user.

    Types are strict: ``{"name": 123}`` or ``{"active": "yes"}`` are rejected
    rather than coerced. Unknown keys, including ``id``, are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: constr(strict=True) = Field(..., description="Display name")
    active: StrictBool = Field(default=False, description="Whether the account is active")
    icon_image: constr(strict=True) = Field(
        default="",
        alias="iconImage",
        description="URI of the user's icon",
    )


class UserRead(BaseModel):
    """Stored user as returned by the write pipeline."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    active: bool
    icon_image: str = Field(serialization_alias="iconImage")
