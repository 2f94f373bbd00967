"""
FastAPI dependencies for authentication endpoints.

Provides dependency injection for the identity provider registry and
provider validation.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from gatekeeper.core.ports import IdentityProvider
from gatekeeper.oauth.config import (
    get_identity_providers,
    get_oauth_config,
    OAuthConfig,
    SUPPORTED_PROVIDERS,
)


logger = logging.getLogger(__name__)


def get_providers() -> dict[str, IdentityProvider]:
    """Provide the identity provider registry dependency."""
    return get_identity_providers()


async def validate_provider(
    provider: str,
    config: Annotated[OAuthConfig, Depends(get_oauth_config)],
) -> str:
    """
    Validate that the provider is supported and configured.

    Args:
        provider: Provider name from path
        config: OAuth configuration

    Returns:
        Validated provider name

    Raises:
        HTTPException: If provider is invalid or not configured
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown provider: {provider}. Supported: {SUPPORTED_PROVIDERS}",
        )

    if not config.is_provider_configured(provider):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Provider '{provider}' is not configured",
        )

    return provider


async def get_provider(
    provider: Annotated[str, Depends(validate_provider)],
    providers: Annotated[dict[str, IdentityProvider], Depends(get_providers)],
) -> IdentityProvider:
    """Resolve the validated provider name to its provider."""
    found = providers.get(provider)
    if found is None:
        logger.error(f"Provider '{provider}' is configured but not registered")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Identity provider for '{provider}' not available",
        )
    return found


# Type aliases for cleaner dependency injection
ValidProvider = Annotated[str, Depends(validate_provider)]
Provider = Annotated[IdentityProvider, Depends(get_provider)]
