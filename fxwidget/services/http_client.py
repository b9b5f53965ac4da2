from __future__ import annotations

"""Small async HTTP helper around a shared httpx.AsyncClient.

One GET, no retries. Failures are split into three kinds so callers can map
them to user-facing errors: non-2xx status, transport failure, undecodable
body.
"""
from typing import Any

import httpx


class HttpError(Exception):
    pass


class HttpStatusError(HttpError):
    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url}")


class HttpTransportError(HttpError):
    pass


class HttpDecodeError(HttpError):
    pass


def build_client(
    *, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )


async def get_json(client: httpx.AsyncClient, url: str) -> Any:
    try:
        resp = await client.get(url)
    except httpx.TransportError as e:
        raise HttpTransportError(f"GET {url} failed: {e!r}") from e
    if not resp.is_success:
        raise HttpStatusError(resp.status_code, url)
    try:
        return resp.json()
    except ValueError as e:  # JSONDecodeError / UnicodeDecodeError
        raise HttpDecodeError(f"Invalid JSON from {url}: {e}") from e
