"""
Shared test configuration and fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from gatekeeper.http.messages import RawMessage
from gatekeeper.integrations.google.provider import GoogleIdentityProvider
from gatekeeper.main import app

client = TestClient(app)

OAUTH_URL = "https://oauth.test"
API_URL = "https://api.test"
TOKEN_URL = f"{OAUTH_URL}/o/oauth2/token"
PROFILE_URL = f"{API_URL}/plus/v1/people/me"
REDIRECT_URI = "http://example.com/auth/google/callback"


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    """
    Clear FastAPI dependency overrides after each test.

    This fixture runs automatically for every test (autouse=True).
    """
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def google_provider():
    """Google provider pointed at fake endpoints."""
    return GoogleIdentityProvider(
        app_id="test-app-id",
        app_secret="test-app-secret",
        redirect_uri=REDIRECT_URI,
        oauth_url=OAUTH_URL,
        api_url=API_URL,
    )


@pytest.fixture
def callback_request():
    """Callback request as Google sends it after consent."""
    return RawMessage(
        [
            "GET /auth/google/callback?code=ABC123 HTTP/1.1",
            "Host: example.com",
            "Accept: text/html",
        ]
    )


@pytest.fixture
def sample_google_profile():
    """Sample Google profile response."""
    return {
        "id": "42",
        "displayName": "Ada",
        "image": {"url": "http://x/y.png"},
    }
