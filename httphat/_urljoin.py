from __future__ import annotations


def url_join(*segments: str) -> str:
    """Join path segments with single slashes.

    Exactly one leading and one trailing slash is stripped from each segment.
    No leading or trailing slash is added to the result.
    """
    return "/".join(_strip_one(segment) for segment in segments)


def _strip_one(segment: str) -> str:
    if segment.startswith("/"):
        segment = segment[1:]
    if segment.endswith("/"):
        segment = segment[:-1]
    return segment
