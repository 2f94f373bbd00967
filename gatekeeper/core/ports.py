"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the core domain and the HTTP layer.
Messages, header sources and identity providers are all structural:
anything with the right methods satisfies them.
"""

from typing import BinaryIO, Iterable, Optional, Protocol, Sequence, runtime_checkable

from gatekeeper.core.domain import Identity


@runtime_checkable
class Message(Protocol):
    """
    An HTTP request or response as raw text lines plus a body.

    The first head line is the request/status line, the rest are headers.
    """

    def head(self) -> Iterable[str]:
        """Return the head lines, in wire order, without line terminators."""
        ...

    def body(self) -> BinaryIO:
        """Return a fresh stream over the body."""
        ...


@runtime_checkable
class HeaderSource(Message, Protocol):
    """A message that can also look up its headers by name."""

    def header(self, name: str) -> Sequence[str]:
        """Return all values of a header, case-insensitively (maybe empty)."""
        ...

    def names(self) -> set[str]:
        """Return all lower-cased header names."""
        ...


@runtime_checkable
class IdentityProvider(Protocol):
    """
    Port (interface) for pluggable third-party authentication.

    Implemented by one class per identity source (e.g. GoogleIdentityProvider).
    """

    def enter(self, request: Message) -> Optional[Identity]:
        """
        Authenticate an inbound request.

        Args:
            request: The inbound (callback) request

        Returns:
            The authenticated identity, or None if this provider
            does not handle the request
        """
        ...

    def exit(self, response: Message, identity: Identity) -> Message:
        """
        Decorate a response before it is sent to an authenticated user.

        Args:
            response: The outbound response
            identity: The identity returned by enter()

        Returns:
            The response to send (possibly the same object)
        """
        ...
