from __future__ import annotations

import typing

import httpx

from ._response import Response

if typing.TYPE_CHECKING:
    from ._options import RequestOption
    from ._t import T

Recipe = typing.Callable[[], httpx.Request]


class Request:
    """A pending HTTP request.

    Each Request keeps the recipe that built it.  :meth:`clone` re-runs the
    recipe to get a fresh :class:`httpx.Request`, so the original is never
    touched and clones can be sent independently.
    """

    def __init__(self, recipe: Recipe) -> None:
        self._recipe = recipe
        self._sent = False
        self.request = recipe()

    def __repr__(self) -> str:
        return f"<Request({self.request.method!r}, {str(self.request.url)!r})>"

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> httpx.URL:
        return self.request.url

    @property
    def headers(self) -> httpx.Headers:
        return self.request.headers

    def clone(self, t: T, *options: RequestOption) -> Request:
        """Return a new Request built from this one with ``options`` applied."""

        def recipe() -> httpx.Request:
            request = self._recipe()
            for option in options:
                option(t, request)
            return request

        return Request(recipe)

    def send(self, t: T) -> Response:
        """Dispatch the request through ``t.client``."""
        if self._sent:
            t.fatal(f"request already sent: {self!r}; clone it to send it again")
        self._sent = True
        t.log(f"{self.request.method} {self.request.url}")
        try:
            response = t.client.send(self.request, stream=True)
        except httpx.RequestError as exc:
            t.fatal(f"failed to send request: {type(exc).__name__}: {exc}")
        return Response(response)
