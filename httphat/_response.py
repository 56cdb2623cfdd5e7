from __future__ import annotations

import typing

import httpx

if typing.TYPE_CHECKING:
    from ._t import T

ResponseAssertion = typing.Callable[["T", "Response"], None]


class Response:
    """An HTTP response produced by :meth:`Request.send`.

    The body stream belongs to this object until :meth:`close`, which
    :meth:`assert_` always calls once the assertions have run.
    """

    def __init__(self, response: httpx.Response) -> None:
        self.response = response

    def __repr__(self) -> str:
        return f"<Response [{self.status_code} {self.response.reason_phrase}]>"

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def url(self) -> httpx.URL:
        return self.response.url

    @property
    def request(self) -> httpx.Request:
        return self.response.request

    @property
    def content(self) -> bytes:
        return self.response.read()

    @property
    def text(self) -> str:
        self.response.read()
        return self.response.text

    def json(self, **kwargs: typing.Any) -> typing.Any:
        self.response.read()
        return self.response.json(**kwargs)

    @property
    def is_closed(self) -> bool:
        return self.response.is_closed

    def close(self) -> None:
        self.response.close()

    def assert_(self, t: T, *assertions: ResponseAssertion) -> Response:
        """Run each assertion against the response, then release the body.

        Every assertion runs once, in order, even after earlier failures.
        A raised ``AssertionError`` is reported through ``t.error``.
        """
        try:
            for assertion in assertions:
                run_assertion(t, assertion, self)
        finally:
            self.close()
        return self


def run_assertion(t: T, assertion: ResponseAssertion, response: Response) -> None:
    try:
        assertion(t, response)
    except AssertionError as exc:
        name = getattr(assertion, "__name__", repr(assertion))
        t.error(str(exc) or f"assertion {name} failed")


def combine_response_assertions(*assertions: ResponseAssertion) -> ResponseAssertion:
    """Return a ResponseAssertion which runs each of ``assertions`` in order."""

    def assertion(t: T, response: Response) -> None:
        for a in assertions:
            run_assertion(t, a, response)

    return assertion
