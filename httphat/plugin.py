"""
pytest plugin providing the ``hat`` fixture.

The target endpoint is taken from, in order: the ``--hat-url`` command line
option, the ``hat_url`` ini value, the ``HAT_URL`` environment variable.
Override the ``hat_url`` fixture to compute it yourself, e.g. from a server
fixture.
"""

from __future__ import annotations

import logging
import os
import typing

import httpx
import pytest

from ._reporter import Reporter
from ._t import T

logger = logging.getLogger("httphat.plugin")

URL_ENVIRONMENT_VARIABLE = "HAT_URL"
DEFAULT_TIMEOUT = 5.0


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("httphat")
    group.addoption(
        "--hat-url",
        dest="hat_url",
        default=None,
        help="Base URL every httphat request is built from.",
    )
    parser.addini("hat_url", "Base URL every httphat request is built from.")
    parser.addini(
        "hat_timeout",
        "Timeout in seconds for the httphat client.",
        default=str(DEFAULT_TIMEOUT),
    )


def _configured_url(config: pytest.Config) -> str | None:
    return (
        config.getoption("hat_url")
        or config.getini("hat_url")
        or os.environ.get(URL_ENVIRONMENT_VARIABLE)
        or None
    )


@pytest.fixture
def hat_url(pytestconfig: pytest.Config) -> str:
    url = _configured_url(pytestconfig)
    if url is None:
        pytest.fail(
            "No target URL configured. Pass --hat-url, set the hat_url ini "
            f"option or the {URL_ENVIRONMENT_VARIABLE} environment variable.",
            pytrace=False,
        )
    return url


@pytest.fixture
def hat_client(pytestconfig: pytest.Config) -> typing.Iterator[httpx.Client]:
    timeout = float(pytestconfig.getini("hat_timeout"))
    with httpx.Client(timeout=timeout) as client:
        yield client


@pytest.fixture
def hat(hat_url: str, hat_client: httpx.Client) -> T:
    logger.debug("target %s", hat_url)
    return T(hat_url, client=hat_client, reporter=Reporter())


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> typing.Generator[None, None, None]:
    funcargs = getattr(item, "funcargs", {})
    t = funcargs.get("hat")
    reporter = t.reporter if isinstance(t, T) else None
    if not isinstance(reporter, Reporter):
        return (yield)

    try:
        result = yield
    except BaseException:
        # Recorded errors go into the report beside the test's own exception.
        if reporter.failed:
            item.add_report_section("call", "httphat", reporter.summary())
        raise
    reporter.check()
    return result
