"""
Shared async HTTP client for provider requests.

Centralizes httpx client creation with connection pooling, timeouts and a
consistent User-Agent, so every provider call goes through one pool.
"""

from __future__ import annotations

import os
from typing import Optional

import httpx

DEFAULT_TIMEOUT = float(os.getenv("PF_HTTP_TIMEOUT", "15"))
DEFAULT_CONNECT_TIMEOUT = float(os.getenv("PF_HTTP_CONNECT_TIMEOUT", "5"))
USER_AGENT = os.getenv("PF_HTTP_UA", "proof-fixture-toolkit/1.x")

_async_client: Optional[httpx.AsyncClient] = None


def build_async_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create a new client with the toolkit defaults.

    ``transport`` is mainly there for tests (``httpx.MockTransport``).
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(DEFAULT_TIMEOUT, connect=DEFAULT_CONNECT_TIMEOUT),
        limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    )


def get_async_client() -> httpx.AsyncClient:
    """Get the shared asynchronous httpx client."""
    global _async_client
    if _async_client is None or _async_client.is_closed:
        _async_client = build_async_client()
    return _async_client


async def aclose_async_client() -> None:
    global _async_client
    if _async_client is not None:
        await _async_client.aclose()
        _async_client = None
