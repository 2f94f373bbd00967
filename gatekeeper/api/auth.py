"""
Third-party login API endpoints.

Provides the minimal API surface for identity providers:
- GET /auth/{provider}/login - Redirect to the provider's consent page
- GET /auth/{provider}/callback - Complete the handshake, return the identity

This adapter only translates HTTP to Python and back. The handshake
itself lives in the providers.
"""

import json
import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from gatekeeper.api.dependencies import Provider, ValidProvider
from gatekeeper.http.messages import (
    RawMessage,
    message_from_request,
    response_from_message,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.get("/{provider}/login")
async def login(
    name: ValidProvider,
    identity_provider: Provider,
    state: str | None = None,
):
    """
    Start the login flow.

    Redirects the user to the provider's authorization page.

    Args:
        name: Provider name from path (google)
        identity_provider: Identity provider
        state: Optional opaque value echoed back to the callback

    Returns:
        Redirect to the provider's authorization page
    """
    authorization_url = getattr(identity_provider, "authorization_url", None)
    if authorization_url is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Provider '{name}' has no login page",
        )

    logger.info(
        f"Starting login flow for provider: {name}",
        extra={"provider": name},
    )
    return RedirectResponse(url=authorization_url(state))


@router.get("/{provider}/callback")
async def callback(
    name: ValidProvider,
    identity_provider: Provider,
    request: Request,
):
    """
    Handle the callback from the provider.

    Exchanges the authorization code for the user's identity. Domain
    errors are translated by the exception handlers in main.py.

    Args:
        name: Provider name from path
        identity_provider: Identity provider
        request: Starlette request (contains the authorization code)

    Returns:
        The authenticated identity, after the provider decorated the response

    Raises:
        HTTPException: 401 if the provider did not recognize a login
    """
    logger.info(
        f"Callback received for provider: {name}",
        extra={"provider": name},
    )

    message = await message_from_request(request)
    identity = await run_in_threadpool(identity_provider.enter, message)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Not a login attempt for provider '{name}'",
        )

    body = json.dumps({"status": "success", "identity": identity.model_dump()})
    response = RawMessage(
        ["HTTP/1.1 200 OK", "Content-Type: application/json"],
        body.encode("utf-8"),
    )
    return response_from_message(identity_provider.exit(response, identity))
