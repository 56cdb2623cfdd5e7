from __future__ import annotations

import re
import typing

import httpx

from ._reporter import Reporter
from ._request import Request

if typing.TYPE_CHECKING:
    from ._options import RequestOption

# RFC 9110 token characters.
_METHOD_REGEX = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class T:
    """Per-test context: the target endpoint, the client and the reporter.

    A client passed in stays owned by the caller. One created here is closed
    by :meth:`close` or on leaving a ``with`` block.
    """

    def __init__(
        self,
        url: str | httpx.URL,
        client: httpx.Client | None = None,
        reporter: typing.Any | None = None,
    ) -> None:
        self.url = httpx.URL(url)
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client()
        self.reporter = reporter if reporter is not None else Reporter()

    def __repr__(self) -> str:
        return f"<T({str(self.url)!r})>"

    def __enter__(self) -> T:
        return self

    def __exit__(self, *args: typing.Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the client if this context created it."""
        if self._owns_client:
            self.client.close()

    @property
    def failed(self) -> bool:
        return self.reporter.failed

    def fatal(self, message: str) -> typing.NoReturn:
        self.reporter.fatal(message)
        raise RuntimeError(f"reporter did not abort the test: {message}")

    def error(self, message: str) -> None:
        self.reporter.error(message)

    def log(self, message: str) -> None:
        self.reporter.log(message)

    def request(self, method: str, *options: RequestOption) -> Request:
        """Create a request to the endpoint with ``options`` applied."""

        def recipe() -> httpx.Request:
            if not _METHOD_REGEX.match(method):
                self.fatal(f"failed to create request: invalid method {method!r}")
            try:
                request = self.client.build_request(method, self.url)
            except (httpx.InvalidURL, TypeError, ValueError) as exc:
                self.fatal(f"failed to create request: {exc}")
            for option in options:
                option(self, request)
            return request

        return Request(recipe)

    def get(self, *options: RequestOption) -> Request:
        return self.request("GET", *options)

    def head(self, *options: RequestOption) -> Request:
        return self.request("HEAD", *options)

    def post(self, *options: RequestOption) -> Request:
        return self.request("POST", *options)

    def put(self, *options: RequestOption) -> Request:
        return self.request("PUT", *options)

    def patch(self, *options: RequestOption) -> Request:
        return self.request("PATCH", *options)

    def delete(self, *options: RequestOption) -> Request:
        return self.request("DELETE", *options)
