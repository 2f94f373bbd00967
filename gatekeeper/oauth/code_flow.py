"""
OAuth2 authorization-code flow, as an identity provider.

Every call to enter() runs the whole handshake to completion or failure:

1. read the authorization code from the callback URL,
2. exchange it for an access token at the token endpoint,
3. fetch the user profile with that token,
4. normalize the profile into an Identity.

Each hop fails with its own error, so callers can tell a bad callback
(BadRequest) from an unavailable provider (UpstreamFailure).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError

from gatekeeper.core.domain import Identity, ProviderConfig
from gatekeeper.core.exceptions import BadRequest, UpstreamFailure
from gatekeeper.core.ports import Message
from gatekeeper.http.messages import request_url
from gatekeeper.oauth.models import TokenResponse


logger = logging.getLogger(__name__)


class OAuth2CodeFlowProvider(ABC):
    """
    Base class for OAuth2 authorization-code identity providers.

    Subclasses supply the endpoints and the profile normalization.
    Instances are immutable and safe to share between threads; equality
    is defined by the provider class and its credentials.
    """

    provider_name = "oauth2"
    display_name = "OAuth2 provider"

    def __init__(self, config: ProviderConfig, timeout: float = 10.0):
        self._config = config
        self._timeout = timeout

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @abstractmethod
    def token_url(self) -> str:
        """URL of the token endpoint."""
        ...

    @abstractmethod
    def profile_url(self) -> str:
        """URL of the profile endpoint."""
        ...

    @abstractmethod
    def parse_profile(self, profile: dict[str, Any]) -> Identity:
        """
        Normalize a profile document into an Identity.

        Raises:
            BadRequest: If the provider reported an error instead of a profile
            UpstreamFailure: If the document makes no sense
        """
        ...

    def enter(self, request: Message) -> Identity | None:
        """
        Complete the login handshake for a callback request.

        Args:
            request: Callback request carrying the "code" query parameter

        Returns:
            The authenticated identity

        Raises:
            BadRequest: If the code is missing or the provider rejects the token
            UpstreamFailure: If the provider cannot be reached or misbehaves
        """
        code = self.authorization_code(request)
        with httpx.Client(timeout=self._timeout) as client:
            token = self._exchange_code(client, code)
            profile = self._fetch_profile(client, token)
        identity = self.parse_profile(profile)

        logger.info(
            f"Authenticated user via {self.display_name}",
            extra={"provider": self.provider_name, "urn": identity.urn},
        )
        return identity

    def exit(self, response: Message, identity: Identity) -> Message:
        """Return the response unchanged."""
        return response

    def authorization_code(self, request: Message) -> str:
        """
        Read the authorization code from a callback request.

        Raises:
            BadRequest: If the callback URL has no "code" parameter
        """
        code = request_url(request).params.get("code")
        if code is None:
            logger.warning(
                "Callback without authorization code",
                extra={"provider": self.provider_name},
            )
            raise BadRequest(
                f"code is not provided by {self.display_name}, probably some mistake"
            )
        return code

    def _exchange_code(self, client: httpx.Client, code: str) -> str:
        """Exchange the authorization code for an access token."""
        url = self.token_url()
        logger.debug(
            f"Exchanging authorization code at {url}",
            extra={"provider": self.provider_name},
        )

        try:
            response = client.post(
                url,
                data={
                    "client_id": self._config.app_id,
                    "redirect_uri": self._config.redirect_uri,
                    "client_secret": self._config.app_secret,
                    "grant_type": "authorization_code",
                    "code": code,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.RequestError as e:
            logger.error(f"Network error during token exchange: {e}")
            raise UpstreamFailure(
                f"Network error during token exchange with {self.display_name}: {e}"
            ) from e

        if response.status_code != 200:
            logger.error(
                f"Token exchange failed: {response.text}",
                extra={"provider": self.provider_name, "status_code": response.status_code},
            )
            raise UpstreamFailure(
                f"{self.display_name} token endpoint returned "
                f"HTTP {response.status_code}: {response.text}"
            )

        try:
            return TokenResponse.model_validate(response.json()).access_token
        except (ValueError, ValidationError) as e:
            raise UpstreamFailure(
                f"Invalid token response from {self.display_name}: {e}"
            ) from e

    def _fetch_profile(self, client: httpx.Client, token: str) -> dict[str, Any]:
        """Fetch the raw profile document with the access token."""
        url = self.profile_url()
        logger.debug(
            f"Fetching profile from {url}",
            extra={"provider": self.provider_name},
        )

        try:
            response = client.get(url, params={"access_token": token})
        except httpx.RequestError as e:
            logger.error(f"Network error during profile fetch: {e}")
            raise UpstreamFailure(
                f"Network error while fetching profile from {self.display_name}: {e}"
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFailure(
                f"Invalid profile response from {self.display_name} "
                f"(HTTP {response.status_code}): {e}"
            ) from e
        if not isinstance(data, dict):
            raise UpstreamFailure(
                f"Invalid profile response from {self.display_name}: expected an object"
            )
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OAuth2CodeFlowProvider):
            return NotImplemented
        return type(self) is type(other) and self._config == other._config

    def __hash__(self) -> int:
        return hash((type(self), self._config))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"
