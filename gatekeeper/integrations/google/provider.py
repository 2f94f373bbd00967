"""
Google identity provider.

Google OAuth2 landing/callback handling: turns the callback Google
redirects to into an Identity of the form ``urn:google:<id>``.
"""

import logging
from typing import Any

from authlib.common.urls import add_params_to_uri
from pydantic import ValidationError

from gatekeeper.core.domain import Identity, ProviderConfig
from gatekeeper.core.exceptions import BadRequest, UpstreamFailure
from gatekeeper.integrations.google.models import GoogleProfile
from gatekeeper.oauth.code_flow import OAuth2CodeFlowProvider


logger = logging.getLogger(__name__)

GOOGLE_OAUTH_URL = "https://accounts.google.com"
GOOGLE_API_URL = "https://www.googleapis.com"
GOOGLE_PROFILE_SCOPE = "https://www.googleapis.com/auth/userinfo.profile"

DEFAULT_NAME = "unknown"
DEFAULT_PICTURE = "#"


class GoogleIdentityProvider(OAuth2CodeFlowProvider):
    """
    Google OAuth2 authorization-code provider.

    Args:
        app_id: Google client ID
        app_secret: Google client secret
        redirect_uri: Redirect URI, exactly as registered in the Google console
        oauth_url: Google OAuth base URL (overridable for testing)
        api_url: Google API base URL (overridable for testing)
        timeout: HTTP timeout for each outbound call, in seconds
    """

    provider_name = "google"
    display_name = "Google"

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        redirect_uri: str,
        oauth_url: str = GOOGLE_OAUTH_URL,
        api_url: str = GOOGLE_API_URL,
        timeout: float = 10.0,
    ):
        super().__init__(
            ProviderConfig(
                app_id=app_id,
                app_secret=app_secret,
                redirect_uri=redirect_uri,
                oauth_url=oauth_url.rstrip("/"),
                api_url=api_url.rstrip("/"),
            ),
            timeout=timeout,
        )

    def token_url(self) -> str:
        return f"{self.config.oauth_url}/o/oauth2/token"

    def profile_url(self) -> str:
        return f"{self.config.api_url}/plus/v1/people/me"

    def authorization_url(self, state: str | None = None) -> str:
        """
        Build the link that sends the user to Google's consent page.

        Args:
            state: Opaque value Google echoes back to the callback

        Returns:
            Authorization URL
        """
        params = [
            ("client_id", self.config.app_id),
            ("redirect_uri", self.config.redirect_uri),
            ("response_type", "code"),
            ("scope", GOOGLE_PROFILE_SCOPE),
        ]
        if state is not None:
            params.append(("state", state))
        return add_params_to_uri(f"{self.config.oauth_url}/o/oauth2/auth", params)

    def parse_profile(self, profile: dict[str, Any]) -> Identity:
        try:
            parsed = GoogleProfile.model_validate(profile)
        except ValidationError as e:
            raise UpstreamFailure(f"Failed to parse Google profile: {e}") from e

        if parsed.error is not None:
            logger.warning(
                f"Google refused the profile request: {parsed.error.message}",
                extra={"provider": self.provider_name},
            )
            raise BadRequest(
                "could not retrieve id from Google, "
                f"possible cause: {parsed.error.message}."
            )

        if not parsed.id:
            raise UpstreamFailure("Google profile has no id")

        picture = DEFAULT_PICTURE
        if parsed.image is not None and parsed.image.url is not None:
            picture = parsed.image.url
        name = parsed.display_name if parsed.display_name is not None else DEFAULT_NAME

        return Identity(
            urn=f"urn:google:{parsed.id}",
            properties={"name": name, "picture": picture},
        )
