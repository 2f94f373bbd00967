"""
Tests for OAuth configuration and identity provider registry.
"""

import os
from unittest.mock import patch

from gatekeeper.integrations.google.provider import GoogleIdentityProvider
from gatekeeper.oauth.config import (
    OAuthConfig,
    create_identity_providers,
    get_identity_providers,
    reset_identity_providers,
    SUPPORTED_PROVIDERS,
)


class TestOAuthConfig:
    """Tests for OAuthConfig."""

    def test_from_env_loads_variables(self):
        """Test loading config from environment variables."""
        env = {
            "BASE_URL": "https://example.com",
            "GOOGLE_CLIENT_ID": "google-id",
            "GOOGLE_CLIENT_SECRET": "google-secret",
            "GOOGLE_REDIRECT_URI": "https://example.com/custom/callback",
            "GOOGLE_OAUTH_URL": "https://oauth.test",
            "GOOGLE_API_URL": "https://api.test",
            "OAUTH_HTTP_TIMEOUT": "2.5",
        }

        with patch.dict(os.environ, env, clear=False):
            config = OAuthConfig.from_env()

        assert config.base_url == "https://example.com"
        assert config.google_client_id == "google-id"
        assert config.google_client_secret == "google-secret"
        assert config.google_redirect_uri == "https://example.com/custom/callback"
        assert config.google_oauth_url == "https://oauth.test"
        assert config.google_api_url == "https://api.test"
        assert config.http_timeout == 2.5

    def test_from_env_handles_missing(self):
        """Test loading config with missing variables."""
        with patch.dict(os.environ, {"BASE_URL": "https://example.com"}, clear=True):
            config = OAuthConfig.from_env()

        assert config.base_url == "https://example.com"
        assert config.google_client_id is None
        assert config.google_client_secret is None
        assert config.google_redirect_uri is None
        assert config.google_oauth_url == "https://accounts.google.com"
        assert config.google_api_url == "https://www.googleapis.com"
        assert config.http_timeout == 10.0

    def test_get_callback_url(self):
        """Test callback URL generation."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id=None,
            google_client_secret=None,
        )

        assert config.get_callback_url("google") == "https://example.com/auth/google/callback"

    def test_get_callback_url_explicit_redirect(self):
        """Test an explicit redirect URI wins over the derived one."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id=None,
            google_client_secret=None,
            google_redirect_uri="https://login.example.com/google",
        )

        assert config.get_callback_url("google") == "https://login.example.com/google"

    def test_is_provider_configured_google_true(self):
        """Test Google provider is configured when credentials exist."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id="id",
            google_client_secret="secret",
        )

        assert config.is_provider_configured("google") is True

    def test_is_provider_configured_google_false_missing_id(self):
        """Test Google not configured when client_id missing."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id=None,
            google_client_secret="secret",
        )

        assert config.is_provider_configured("google") is False

    def test_is_provider_configured_google_false_missing_secret(self):
        """Test Google not configured when client_secret missing."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id="id",
            google_client_secret=None,
        )

        assert config.is_provider_configured("google") is False

    def test_is_provider_configured_unknown(self):
        """Test unknown provider returns False."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id="id",
            google_client_secret="secret",
        )

        assert config.is_provider_configured("unknown") is False

    def test_get_configured_providers(self):
        """Test listing configured providers."""
        configured = OAuthConfig(
            base_url="https://example.com",
            google_client_id="id",
            google_client_secret="secret",
        )
        unconfigured = OAuthConfig(
            base_url="https://example.com",
            google_client_id=None,
            google_client_secret=None,
        )

        assert configured.get_configured_providers() == ["google"]
        assert unconfigured.get_configured_providers() == []


class TestProviderRegistry:
    """Tests for identity provider registry creation."""

    def test_create_registry_no_providers(self):
        """Test creating registry with no providers configured."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id=None,
            google_client_secret=None,
        )

        assert create_identity_providers(config) == {}

    def test_create_registry_with_google(self):
        """Test creating registry with Google configured."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id="google-id",
            google_client_secret="google-secret",
            google_oauth_url="https://oauth.test",
            google_api_url="https://api.test",
        )

        providers = create_identity_providers(config)

        provider = providers["google"]
        assert isinstance(provider, GoogleIdentityProvider)
        assert provider == GoogleIdentityProvider(
            "google-id", "google-secret", "https://example.com/auth/google/callback"
        )
        assert provider.token_url() == "https://oauth.test/o/oauth2/token"
        assert provider.profile_url() == "https://api.test/plus/v1/people/me"

    def test_registry_singleton_and_reset(self):
        """Test the registry is created once until reset."""
        config = OAuthConfig(
            base_url="https://example.com",
            google_client_id="google-id",
            google_client_secret="google-secret",
        )

        reset_identity_providers()
        try:
            with patch("gatekeeper.oauth.config.get_oauth_config", return_value=config):
                first = get_identity_providers()
                second = get_identity_providers()

            assert first is second
            assert "google" in first

            reset_identity_providers()
            with patch("gatekeeper.oauth.config.get_oauth_config", return_value=config):
                assert get_identity_providers() is not first
        finally:
            reset_identity_providers()


class TestSupportedProviders:
    """Tests for supported providers list."""

    def test_supported_providers_includes_google(self):
        """Test Google is in supported providers."""
        assert "google" in SUPPORTED_PROVIDERS
