"""HTTP client helpers for talking to the remote note store."""

from typing import Any

import httpx

from core.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared HTTP client for note store requests."""
    return httpx.AsyncClient(
        base_url=settings.api_url,
        timeout=settings.api_timeout,
    )


def _get_headers(token: str) -> dict[str, str]:
    """Get common headers for API requests."""
    headers = {"X-Request-Source": "notes-client"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def api_get(client: httpx.AsyncClient, path: str, token: str) -> Any:
    """Make an authenticated GET request to the API."""
    response = await client.get(path, headers=_get_headers(token))
    response.raise_for_status()
    return response.json()


async def api_put(
    client: httpx.AsyncClient,
    path: str,
    token: str,
    json: dict[str, Any],
) -> None:
    """Make an authenticated PUT request to the API. The response body is not read."""
    response = await client.put(
        path,
        json=json,
        headers=_get_headers(token),
    )
    response.raise_for_status()
