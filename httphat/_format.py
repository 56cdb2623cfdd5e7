from __future__ import annotations

import json
import typing

if typing.TYPE_CHECKING:
    from ._response import Response

TEXT_CONTENT_TYPES = (
    "text/",
    "application/json",
    "application/xml",
    "application/javascript",
    "application/ecmascript",
)


def is_binary_content(content: bytes) -> bool:
    return b"\0" in content


def is_binary_content_type(content_type: str) -> bool:
    ct = content_type.lower().split(";")[0].strip()
    return not any(ct.startswith(t) for t in TEXT_CONTENT_TYPES) and ct != ""


def format_response_plain(response: Response) -> str:
    """Render a response as status line, headers and body.

    Reads the body if it has not been read yet.
    """
    raw = response.response
    status_line = f"{raw.http_version} {raw.status_code} {raw.reason_phrase}".rstrip()
    lines: list[str] = [status_line]

    for key, value in raw.headers.items():
        lines.append(f"{key}: {value}")

    lines.append("")

    content = response.content
    if content:
        content_type = raw.headers.get("content-type", "")

        if is_binary_content_type(content_type) or is_binary_content(content):
            lines.append(f"<{len(content)} bytes of binary data>")
        elif "application/json" in content_type:
            try:
                data = json.loads(content)
                lines.append(json.dumps(data, indent=4, ensure_ascii=False))
            except (json.JSONDecodeError, UnicodeDecodeError):
                lines.append(response.text)
        else:
            lines.append(response.text)

    return "\n".join(lines)
