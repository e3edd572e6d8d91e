"""
API error parsing for the notes client.

Translates httpx failures (non-success responses and transport errors) into a small
set of semantic categories so callers can report them without inspecting raw responses.
"""

from dataclasses import dataclass
from typing import Any, Literal

import httpx

ErrorCategory = Literal[
    "auth",        # 401 - Invalid or expired token
    "forbidden",   # 403 - Access denied
    "not_found",   # 404 - Note not found
    "validation",  # 400/422 - Rejected request body
    "conflict",    # 409 - Note changed concurrently
    "network",     # Connection, timeout or protocol error before a response
    "internal",    # 5xx or unexpected errors
]


@dataclass
class ParsedApiError:
    """Parsed API error with semantic category and message."""

    category: ErrorCategory
    message: str
    status_code: int | None = None


def parse_http_error(  # noqa: PLR0911
    e: httpx.HTTPStatusError,
    note_id: str = "",
) -> ParsedApiError:
    """
    Parse HTTP error into semantic categories.

    Args:
        e: The HTTP status error from httpx
        note_id: ID of the note the request targeted, for error messages

    Returns:
        ParsedApiError with category, message, and status code
    """
    status = e.response.status_code

    if status == 401:
        return ParsedApiError("auth", "Invalid or expired token", status)

    if status == 403:
        return ParsedApiError("forbidden", "Access denied", status)

    if status == 404:
        msg = f"Note '{note_id}' not found" if note_id else "Not found"
        return ParsedApiError("not_found", msg, status)

    if status == 409:
        detail = _safe_get_detail(e)
        msg = detail if isinstance(detail, str) and detail else "Note was modified concurrently"
        return ParsedApiError("conflict", msg, status)

    if status in (400, 422):
        return ParsedApiError("validation", _extract_validation_message(e), status)

    return ParsedApiError("internal", f"API error {status}", status)


def parse_transport_error(e: httpx.RequestError) -> ParsedApiError:
    """Describe a request that failed before a usable response arrived."""
    if isinstance(e, httpx.TimeoutException):
        return ParsedApiError("network", "Request timed out")
    return ParsedApiError("network", f"Could not reach note store: {e}")


def _safe_get_detail(e: httpx.HTTPStatusError) -> Any:
    """Safely extract detail (or the serverless `error` field) from error response."""
    try:
        body = e.response.json()
        if isinstance(body, dict):
            return body.get("detail", body.get("error", {}))
        return {}
    except ValueError:
        return {}


def _extract_validation_message(e: httpx.HTTPStatusError) -> str:
    """Extract validation error message from 400/422 response."""
    detail = _safe_get_detail(e)
    if isinstance(detail, dict):
        return detail.get("message", "Validation error") if detail else "Validation error"
    return str(detail) if detail else "Validation error"
