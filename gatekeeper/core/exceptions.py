"""
Domain exceptions for header parsing and authentication.

Every exception carries the HTTP status it maps to, so the web layer can
translate them with centralized exception handlers in main.py.
"""


class GatekeeperError(Exception):
    """Base exception for all gatekeeper errors."""

    status_code = 500


class ClientError(GatekeeperError):
    """
    Raised when the caller sent something we cannot work with.

    Should result in a 4xx response; retrying the same input will not help.
    """

    status_code = 400


class MalformedMessage(ClientError):
    """Raised when a message head is empty or has a line without a separator."""

    pass


class MissingHeader(ClientError):
    """Raised when a mandatory header has no values."""

    pass


class BadRequest(ClientError):
    """
    Raised when an authentication handshake cannot be completed.

    Covers a callback without an authorization code and errors reported
    by the identity provider itself.
    """

    pass


class UpstreamFailure(GatekeeperError):
    """
    Raised when the identity provider or the network is unavailable.

    Non-200 token responses, transport errors and unparseable upstream
    payloads end up here. Should result in a 502 response.
    """

    status_code = 502
