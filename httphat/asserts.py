"""
httphat.asserts — ready-made response assertions.

Each function returns a ResponseAssertion for use with
:meth:`httphat.Response.assert_`.  Failures are reported through
``t.error`` so the remaining assertions still run; every report carries a
plain-text dump of the response.

Examples
--------
>>> hat.get(httphat.path("/items")).send(hat).assert_(
...     hat,
...     asserts.status_equal(200),
...     asserts.header_equal("content-type", "application/json"),
...     asserts.json_equal([]),
... )
"""

from __future__ import annotations

import re
import typing

from ._format import format_response_plain

if typing.TYPE_CHECKING:
    from ._response import Response, ResponseAssertion
    from ._t import T

__all__ = [
    "body_equal",
    "body_matches",
    "body_not_matches",
    "header_equal",
    "header_matches",
    "json_equal",
    "status_equal",
    "status_success",
]


def _report(t: T, response: Response, message: str) -> None:
    t.error(f"{message}\n\n{format_response_plain(response)}")


def _compile(pattern: str | bytes | re.Pattern[typing.Any]) -> re.Pattern[typing.Any]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def _search(regex: re.Pattern[typing.Any], response: Response) -> bool:
    if isinstance(regex.pattern, bytes):
        return regex.search(response.content) is not None
    return regex.search(response.text) is not None


def status_equal(expected: int) -> ResponseAssertion:
    def assertion(t: T, response: Response) -> None:
        if response.status_code != expected:
            _report(t, response, f"status: expected {expected}, got {response.status_code}")

    return assertion


def status_success() -> ResponseAssertion:
    """Status code is 2xx."""

    def assertion(t: T, response: Response) -> None:
        if not response.response.is_success:
            _report(t, response, f"status: expected 2xx, got {response.status_code}")

    return assertion


def header_equal(name: str, expected: str) -> ResponseAssertion:
    def assertion(t: T, response: Response) -> None:
        actual = response.headers.get(name)
        if actual != expected:
            _report(t, response, f"header {name!r}: expected {expected!r}, got {actual!r}")

    return assertion


def header_matches(name: str, pattern: str | re.Pattern[str]) -> ResponseAssertion:
    regex = _compile(pattern)

    def assertion(t: T, response: Response) -> None:
        actual = response.headers.get(name)
        if actual is None or regex.search(actual) is None:
            _report(
                t,
                response,
                f"header {name!r}: {actual!r} does not match {regex.pattern!r}",
            )

    return assertion


def body_equal(expected: bytes | str) -> ResponseAssertion:
    def assertion(t: T, response: Response) -> None:
        actual: bytes | str = (
            response.text if isinstance(expected, str) else response.content
        )
        if actual != expected:
            _report(t, response, f"body: expected {expected!r}, got {actual!r}")

    return assertion


def body_matches(pattern: str | bytes | re.Pattern[typing.Any]) -> ResponseAssertion:
    regex = _compile(pattern)

    def assertion(t: T, response: Response) -> None:
        if not _search(regex, response):
            _report(t, response, f"body does not match {regex.pattern!r}")

    return assertion


def body_not_matches(pattern: str | bytes | re.Pattern[typing.Any]) -> ResponseAssertion:
    regex = _compile(pattern)

    def assertion(t: T, response: Response) -> None:
        if _search(regex, response):
            _report(t, response, f"body unexpectedly matches {regex.pattern!r}")

    return assertion


def json_equal(expected: typing.Any) -> ResponseAssertion:
    """Body decodes as JSON equal to ``expected``."""

    def assertion(t: T, response: Response) -> None:
        try:
            actual = response.json()
        except ValueError as exc:
            _report(t, response, f"body is not valid JSON: {exc}")
            return
        if actual != expected:
            _report(t, response, f"json: expected {expected!r}, got {actual!r}")

    return assertion
