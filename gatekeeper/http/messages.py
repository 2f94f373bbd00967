"""
Adapters between wire-level messages and the Message port.

RawMessage is the in-memory message used everywhere in gatekeeper.
Starlette requests and httpx responses are converted into it (and response
messages back into Starlette responses), so the header parser and the
identity providers never depend on a web framework.
"""

import io
from dataclasses import dataclass
from typing import BinaryIO

import httpx
from starlette.requests import Request
from starlette.responses import Response

from gatekeeper.core.exceptions import MalformedMessage
from gatekeeper.core.ports import Message
from gatekeeper.http.headers import HeaderFacade, HeaderIndex


@dataclass(frozen=True)
class RawMessage:
    """An HTTP message as head lines plus body bytes."""

    lines: tuple[str, ...]
    content: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    def head(self) -> tuple[str, ...]:
        return self.lines

    def body(self) -> BinaryIO:
        return io.BytesIO(self.content)

    @classmethod
    def parse(cls, data: bytes) -> "RawMessage":
        """
        Split a wire-format message into head lines and body.

        The head ends at the first empty line; both CRLF and bare LF
        line endings are accepted.

        Args:
            data: Raw message bytes

        Returns:
            RawMessage with the decoded head and the untouched body
        """
        for separator in (b"\r\n\r\n", b"\n\n"):
            if separator in data:
                head, _, content = data.partition(separator)
                break
        else:
            head, content = data, b""
        # latin-1 maps every byte; HTTP heads are not guaranteed to be UTF-8
        return cls(head.decode("latin-1").splitlines(), content)


async def message_from_request(request: Request) -> RawMessage:
    """
    Convert a Starlette request into a RawMessage.

    The request line uses the path and query exactly as received;
    every raw header becomes one line, duplicates included.
    """
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    version = request.scope.get("http_version", "1.1")
    lines = [f"{request.method} {target} HTTP/{version}"]
    lines.extend(
        f"{name.decode('latin-1')}: {value.decode('latin-1')}"
        for name, value in request.headers.raw
    )
    return RawMessage(lines, await request.body())


def message_from_response(response: httpx.Response) -> RawMessage:
    """Convert an httpx response into a RawMessage."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.multi_items())
    return RawMessage(lines, response.content)


def request_url(request: Message) -> httpx.URL:
    """
    Rebuild the URL of a request from its request line and Host header.

    Absolute-form targets ("GET http://host/path HTTP/1.1") are used as-is;
    otherwise the Host header is used, falling back to "localhost".

    Raises:
        MalformedMessage: If the head is empty, the request line has no
            target, or the target and Host do not form a valid URL
    """
    first = next(iter(request.head()), None)
    if first is None:
        raise MalformedMessage("head must contain at least one line")
    parts = first.split()
    if len(parts) < 2:
        raise MalformedMessage(f'invalid request line: "{first}"')
    target = parts[1]
    try:
        url = httpx.URL(target)
    except httpx.InvalidURL as e:
        raise MalformedMessage(f'invalid request target: "{target}"') from e
    if url.is_absolute_url:
        return url
    host = HeaderFacade(request).single("Host", "localhost")
    try:
        return httpx.URL(f"http://{host}{target}")
    except httpx.InvalidURL as e:
        raise MalformedMessage(f'invalid Host header: "{host}"') from e


def response_from_message(message: Message) -> Response:
    """
    Convert a response message back into a Starlette response.

    The status code comes from the status line; headers are read through
    HeaderIndex, so duplicates (e.g. several Set-Cookie lines) survive.

    Raises:
        MalformedMessage: If the status line or a header line is invalid
    """
    index = HeaderIndex(message)
    headers = index.map()
    status_line = next(iter(index.head()))
    parts = status_line.split(maxsplit=2)
    if len(parts) < 2 or not parts[1].isdigit():
        raise MalformedMessage(f'invalid status line: "{status_line}"')

    response = Response(content=index.body().read(), status_code=int(parts[1]))
    for name, values in headers.items():
        if name == "content-length":
            continue
        for value in values:
            response.headers.append(name, value)
    return response
