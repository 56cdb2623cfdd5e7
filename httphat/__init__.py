from . import asserts  # noqa: F401
from ._format import format_response_plain
from ._options import (
    ReaderStream,
    RequestOption,
    body,
    combine_request_options,
    header,
    json_body,
    path,
    url_params,
)
from ._reporter import Reporter
from ._request import Request
from ._response import Response, ResponseAssertion, combine_response_assertions
from ._t import T
from ._urljoin import url_join

__title__ = "httphat"
__description__ = "Fluent HTTP test harness for pytest."
__version__ = "0.1.0"

_EXCLUDED_FROM_ALL = {"plugin"}

__all__ = sorted(
    (
        member
        for member in list(vars().keys())
        if (
            not member.startswith("_")
            or member in ["__description__", "__title__", "__version__"]
        )
        and member not in _EXCLUDED_FROM_ALL
    ),
    key=str.casefold,
)
