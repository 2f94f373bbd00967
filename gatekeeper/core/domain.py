"""
Core domain models for authenticated identities.

These models represent the business domain and are independent of
any infrastructure or delivery mechanism.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class Identity(BaseModel):
    """
    An authenticated user, as reported by an identity provider.

    The URN is namespaced by provider (``urn:google:1234``), so identities
    from different providers never collide. Properties hold normalized
    profile data such as ``name`` and ``picture``; they are stored as a
    read-only mapping and dumped back as a plain dict.
    """

    urn: str = Field(min_length=1, description="Provider-namespaced user URN")
    properties: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Normalized profile properties",
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("properties", mode="after")
    @classmethod
    def freeze_properties(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Copy the properties into a read-only mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("properties")
    def dump_properties(self, properties: Mapping[str, str]) -> dict[str, str]:
        return dict(properties)

    def __hash__(self) -> int:
        return hash((self.urn, frozenset(self.properties.items())))

    @property
    def provider(self) -> str:
        """Provider namespace of the URN ("google" for urn:google:42)."""
        parts = self.urn.split(":", 2)
        if len(parts) < 3 or parts[0] != "urn":
            return "unknown"
        return parts[1]

    def get(self, name: str, default: Any = None) -> Any:
        """Get a single property."""
        return self.properties.get(name, default)


@dataclass(frozen=True)
class ProviderConfig:
    """
    Static identity of an OAuth application.

    Two configs are equal when the credentials match; endpoint overrides
    (used to point at fakes in tests) do not take part in equality.
    """

    app_id: str
    app_secret: str = field(repr=False)
    redirect_uri: str
    oauth_url: str = field(compare=False)
    api_url: str = field(compare=False)
