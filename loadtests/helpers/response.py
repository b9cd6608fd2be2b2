"""Response error extraction for load test observability.

Parses FabricLoop API error responses into human-readable messages. Every
error the API returns has the shape
``{"error": {"code": "...", "message": "...", "details": {...}}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def error_code(response: Response) -> str | None:
    """Return the ``error.code`` of an API error response, if it has one."""
    try:
        error = response.json().get("error")
    except Exception:
        return None
    return error.get("code") if isinstance(error, dict) else None


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON - return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        detail = f"{error.get('code', 'ERROR')}: {error.get('message', '')}"
        for field_error in error.get("details", {}).get("errors", []) or []:
            if isinstance(field_error, dict):
                detail += f" | {field_error.get('field')}: {field_error.get('message')}"
        return detail

    # Unknown shape - stringify and truncate
    return str(body)[:300]
