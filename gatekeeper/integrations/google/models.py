"""
Google profile API models.

Flattened just enough to normalize a profile into an Identity; every
field is optional because Google omits what the user did not share.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GoogleImage(BaseModel):
    """Profile picture."""

    url: str | None = Field(default=None, description="Picture URL")

    model_config = ConfigDict(extra="allow")


class GoogleError(BaseModel):
    """Error object returned instead of a profile."""

    message: str | None = Field(default=None, description="Error message")
    code: int | None = Field(default=None, description="HTTP status code")

    model_config = ConfigDict(extra="allow")


class GoogleProfile(BaseModel):
    """
    Response of GET /plus/v1/people/me.

    Either ``error`` is set, or ``id`` identifies the user.
    """

    id: str | None = Field(default=None, description="Google user ID")
    display_name: str | None = Field(
        default=None, alias="displayName", description="Display name"
    )
    image: GoogleImage | None = Field(default=None, description="Profile picture")
    error: GoogleError | None = Field(default=None, description="API error")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> Any:
        """Accept numeric IDs."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("error", mode="before")
    @classmethod
    def validate_error(cls, v: Any) -> Any:
        """Accept the bare-string form ("error": "invalid_token")."""
        if isinstance(v, str):
            return {"message": v}
        return v
