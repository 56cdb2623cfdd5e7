from __future__ import annotations

import json
import typing

import httpx

from ._urljoin import url_join

if typing.TYPE_CHECKING:
    from ._t import T

RequestOption = typing.Callable[["T", httpx.Request], None]

BodyContent = typing.Union[bytes, str, typing.IO[bytes], httpx.SyncByteStream]

CHUNK_SIZE = 65_536


class ReaderStream(httpx.SyncByteStream):
    """Request stream over a file-like object.

    Seekable readers are rewound to their starting position each time the
    stream is iterated, so clones sharing a body all send the same bytes.
    Iterating a non-seekable reader twice raises :class:`httpx.StreamConsumed`.

    ``close`` closes the reader when it has a ``close`` method and does
    nothing otherwise.
    """

    def __init__(self, reader: typing.Any, chunk_size: int = CHUNK_SIZE) -> None:
        self._reader = reader
        self._chunk_size = chunk_size
        self._start = _start_position(reader)
        self._consumed = False

    def __iter__(self) -> typing.Iterator[bytes]:
        if self._consumed:
            if self._start is None:
                raise httpx.StreamConsumed()
            self._reader.seek(self._start)
        self._consumed = True
        while True:
            chunk = self._reader.read(self._chunk_size)
            if not chunk:
                return
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk

    def close(self) -> None:
        close = getattr(self._reader, "close", None)
        if close is not None:
            close()


def _start_position(reader: typing.Any) -> int | None:
    seekable = getattr(reader, "seekable", None)
    if seekable is None or not seekable():
        return None
    return reader.tell()


def url_params(values: typing.Any) -> RequestOption:
    """Append query parameters to the request URL.

    ``values`` is anything :class:`httpx.QueryParams` accepts.  Parameters
    are added after any existing query, joined by a single ``&``, and
    duplicate keys are kept.
    """
    encoded = str(httpx.QueryParams(values))

    def option(t: T, request: httpx.Request) -> None:
        if not encoded:
            return
        existing = request.url.query.decode("ascii")
        query = f"{existing}&{encoded}" if existing else encoded
        request.url = request.url.copy_with(query=query.encode("ascii"))

    return option


def path(segment: str) -> RequestOption:
    """Join ``segment`` onto the request URL path.

    A trailing slash on ``segment`` is kept on the resulting path.
    """

    def option(t: T, request: httpx.Request) -> None:
        if not segment:
            t.fatal("path segment must not be empty")
        joined = "/" + url_join(request.url.path, segment).lstrip("/")
        if segment.endswith("/") and not joined.endswith("/"):
            joined += "/"
        request.url = request.url.copy_with(path=joined)

    return option


def body(content: BodyContent) -> RequestOption:
    """Set the request body."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    if isinstance(content, bytes):
        stream: httpx.SyncByteStream = httpx.ByteStream(content)
        length: int | None = len(content)
    elif isinstance(content, httpx.SyncByteStream):
        stream, length = content, None
    elif hasattr(content, "read"):
        stream, length = ReaderStream(content), None
    else:
        raise TypeError(f"Unsupported body type: {type(content).__name__}")

    def option(t: T, request: httpx.Request) -> None:
        request.stream = stream
        # httpx caches the body of requests built without content; drop it so
        # read() consumes the new stream.
        vars(request).pop("_content", None)
        request.headers.pop("Content-Length", None)
        request.headers.pop("Transfer-Encoding", None)
        if length is not None:
            request.headers["Content-Length"] = str(length)
        else:
            request.headers["Transfer-Encoding"] = "chunked"

    return option


def json_body(obj: typing.Any) -> RequestOption:
    """Send ``obj`` as a JSON request body."""
    content = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    return combine_request_options(
        header("Content-Type", "application/json"),
        body(content),
    )


def header(name: str, value: str) -> RequestOption:
    def option(t: T, request: httpx.Request) -> None:
        request.headers[name] = value

    return option


def combine_request_options(*options: RequestOption) -> RequestOption:
    """Return a RequestOption which applies each of ``options`` in order."""

    def option(t: T, request: httpx.Request) -> None:
        for opt in options:
            opt(t, request)

    return option
