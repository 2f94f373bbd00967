"""
HTTP header parsing.

HeaderIndex turns the raw head of any message into a case-insensitive,
multi-valued header map. HeaderFacade adds "mandatory value or fail" and
"value or default" lookups on top of any header source.

Both are immutable and thread-safe: the head is re-parsed on every call
instead of being cached.
"""

import logging
from types import MappingProxyType
from typing import BinaryIO, Callable, Iterable, Iterator, Mapping, Sequence, overload

from gatekeeper.core.exceptions import MalformedMessage, MissingHeader
from gatekeeper.core.ports import HeaderSource, Message


logger = logging.getLogger(__name__)


class HeaderValues(Sequence[str]):
    """
    Values of one header, explaining itself when read past the end.

    The explanation is produced by a callback and only formatted when
    an IndexError is actually raised (or ``diagnostic`` is read).
    """

    __slots__ = ("_values", "_explain")

    def __init__(self, values: Iterable[str], explain: Callable[[], str]):
        self._values = tuple(values)
        self._explain = explain

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[str, ...]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._values[index]
        try:
            return self._values[index]
        except IndexError:
            raise IndexError(self._explain()) from None

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderValues):
            return self._values == other._values
        if isinstance(other, (tuple, list)):
            return self._values == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"HeaderValues({list(self._values)!r})"

    @property
    def diagnostic(self) -> str:
        """Human-readable explanation of what this lookup found."""
        return self._explain()


class HeaderIndex:
    """
    Case-insensitive, multi-valued view of a message's headers.

    Wraps a message and is a message itself: head() and body() pass
    through unchanged.
    """

    def __init__(self, message: Message):
        self._message = message

    def head(self) -> Iterable[str]:
        return self._message.head()

    def body(self) -> BinaryIO:
        return self._message.body()

    def header(self, name: str) -> HeaderValues:
        """
        Get all values of a header.

        Never fails for an absent header: the result is empty, and reading
        from it raises an IndexError that lists the headers that do exist.

        Args:
            name: Header name, in any case

        Returns:
            Values in the order their lines appeared

        Raises:
            MalformedMessage: If the head cannot be parsed
        """
        headers = self.map()
        values = headers.get(name.lower(), ())
        if not values:
            return HeaderValues(
                (),
                lambda: (
                    f'there are no headers by name "{name}" '
                    f"among {len(headers)} others: {sorted(headers)}"
                ),
            )
        return HeaderValues(
            values,
            lambda: f'there are only {len(values)} headers by name "{name}"',
        )

    def names(self) -> set[str]:
        """
        Get all header names, lower-cased.

        Raises:
            MalformedMessage: If the head cannot be parsed
        """
        return set(self.map())

    def map(self) -> Mapping[str, tuple[str, ...]]:
        """
        Parse the head into a read-only multimap.

        The first line (request or status line) is skipped. Each following
        line is split on its first colon; names are trimmed and lower-cased,
        values are trimmed.

        Raises:
            MalformedMessage: If the head is empty or a line has no colon
        """
        lines = iter(self._message.head())
        if next(lines, None) is None:
            raise MalformedMessage("head must contain at least one line")
        parsed: dict[str, list[str]] = {}
        for line in lines:
            name, sep, value = line.partition(":")
            if not sep:
                logger.warning(
                    "Rejecting message with invalid header line",
                    extra={"line": line},
                )
                raise MalformedMessage(f'invalid header: "{line}"')
            parsed.setdefault(name.strip().lower(), []).append(value.strip())
        return MappingProxyType({key: tuple(vals) for key, vals in parsed.items()})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderIndex):
            return NotImplemented
        return self._message == other._message

    def __hash__(self) -> int:
        return hash(self._message)


_MANDATORY = object()


class HeaderFacade:
    """
    Convenience lookups over any header source.

    Accepts a HeaderSource (e.g. HeaderIndex) or a plain message, which
    is wrapped in a HeaderIndex. Adds no parsing of its own.
    """

    def __init__(self, origin: HeaderSource | Message):
        if not isinstance(origin, HeaderSource):
            origin = HeaderIndex(origin)
        self._origin: HeaderSource = origin

    def head(self) -> Iterable[str]:
        return self._origin.head()

    def body(self) -> BinaryIO:
        return self._origin.body()

    def header(self, name: str) -> Sequence[str]:
        return self._origin.header(name)

    def names(self) -> set[str]:
        return self._origin.names()

    def single(self, name: str, default=_MANDATORY) -> str:
        """
        Get the first value of a header.

        Args:
            name: Header name, in any case
            default: Returned verbatim when the header is absent; when
                omitted, an absent header is an error

        Returns:
            First header value, or the default

        Raises:
            MissingHeader: If the header is absent and no default was given
        """
        values = self._origin.header(name)
        if values:
            return values[0]
        if default is _MANDATORY:
            raise MissingHeader(
                f'header "{name}" is mandatory, not found among {sorted(self.names())}'
            )
        return default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderFacade):
            return NotImplemented
        return self._origin == other._origin

    def __hash__(self) -> int:
        return hash(self._origin)
