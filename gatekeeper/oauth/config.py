"""
OAuth2 configuration and identity provider registry.

Each provider (Google, ...) can be configured independently. Providers
without credentials are left out of the registry.
"""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache

from gatekeeper.core.ports import IdentityProvider
from gatekeeper.integrations.google.provider import (
    GOOGLE_API_URL,
    GOOGLE_OAUTH_URL,
    GoogleIdentityProvider,
)


logger = logging.getLogger(__name__)


@dataclass
class OAuthConfig:
    """
    OAuth configuration settings.

    Loaded from environment variables. Only this layer reads the
    environment; providers receive their credentials explicitly.
    """

    base_url: str
    google_client_id: str | None
    google_client_secret: str | None
    google_redirect_uri: str | None = None

    # Endpoint overrides, for pointing at fakes
    google_oauth_url: str = GOOGLE_OAUTH_URL
    google_api_url: str = GOOGLE_API_URL

    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "OAuthConfig":
        """Load configuration from environment variables."""
        return cls(
            base_url=os.getenv("BASE_URL", ""),
            google_client_id=os.getenv("GOOGLE_CLIENT_ID"),
            google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
            google_redirect_uri=os.getenv("GOOGLE_REDIRECT_URI"),
            google_oauth_url=os.getenv("GOOGLE_OAUTH_URL", GOOGLE_OAUTH_URL),
            google_api_url=os.getenv("GOOGLE_API_URL", GOOGLE_API_URL),
            http_timeout=float(os.getenv("OAUTH_HTTP_TIMEOUT", "10")),
        )

    def get_callback_url(self, provider: str) -> str:
        """Generate callback URL for a provider."""
        if provider == "google" and self.google_redirect_uri:
            return self.google_redirect_uri
        return f"{self.base_url}/auth/{provider}/callback"

    def is_provider_configured(self, provider: str) -> bool:
        """Check if a provider has valid credentials configured."""
        if provider == "google":
            return bool(self.google_client_id and self.google_client_secret)
        return False

    def get_configured_providers(self) -> list[str]:
        """List all providers with valid configuration."""
        return [p for p in SUPPORTED_PROVIDERS if self.is_provider_configured(p)]


@lru_cache()
def get_oauth_config() -> OAuthConfig:
    """Get OAuth configuration singleton."""
    return OAuthConfig.from_env()


def create_identity_providers(
    config: OAuthConfig | None = None,
) -> dict[str, IdentityProvider]:
    """
    Create the identity provider registry.

    Registers all configured providers. Providers without
    credentials are skipped (allows partial configuration).

    Args:
        config: OAuth configuration (uses default if not provided)

    Returns:
        Mapping of provider name to provider
    """
    if config is None:
        config = get_oauth_config()

    providers: dict[str, IdentityProvider] = {}

    if config.is_provider_configured("google"):
        providers["google"] = GoogleIdentityProvider(
            app_id=str(config.google_client_id),
            app_secret=str(config.google_client_secret),
            redirect_uri=config.get_callback_url("google"),
            oauth_url=config.google_oauth_url,
            api_url=config.google_api_url,
            timeout=config.http_timeout,
        )
        logger.info("Registered Google identity provider")
    else:
        logger.warning("Google OAuth not configured (missing credentials)")

    return providers


# Global provider registry singleton
_providers: dict[str, IdentityProvider] | None = None


def get_identity_providers() -> dict[str, IdentityProvider]:
    """
    Get the identity provider registry singleton.

    Creates the registry on first access.
    """
    global _providers
    if _providers is None:
        _providers = create_identity_providers()
    return _providers


def reset_identity_providers() -> None:
    """
    Reset the identity provider registry.

    Useful for testing with different configurations.
    """
    global _providers
    _providers = None


# List of supported providers (for validation)
SUPPORTED_PROVIDERS = ["google"]
