from __future__ import annotations

import logging
import typing

import pytest

logger = logging.getLogger("httphat")


class Reporter:
    """Failure sink for a single test case.

    ``fatal`` aborts the test immediately, ``error`` marks it failed and lets
    it continue.  Recorded errors are raised together by :meth:`check`.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def fatal(self, message: str) -> typing.NoReturn:
        logger.error(message)
        pytest.fail(message, pytrace=False)

    def error(self, message: str) -> None:
        logger.error(message)
        self.errors.append(message)

    def log(self, message: str) -> None:
        logger.info(message)

    def summary(self) -> str:
        count = len(self.errors)
        header = f"{count} response assertion{'s' if count != 1 else ''} failed:"
        return "\n\n".join([header, *self.errors])

    def check(self) -> None:
        if self.errors:
            pytest.fail(self.summary(), pytrace=False)
