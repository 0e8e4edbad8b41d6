"""Response error extraction for load test observability.

Parses Wholesale API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Domain validation (400): {"kind": "validation", "errors": {"field": ["msg"]}}
- Other domain errors (403/404/409): {"kind": "...", "detail": "msg"}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if isinstance(body.get("errors"), dict):
        return " | ".join(f"{field}: {', '.join(map(str, msgs))}" for field, msgs in body["errors"].items())

    if "detail" in body:
        return f"{body.get('kind', 'error')}: {body['detail']}"

    return str(body)[:300]
