"""Shared httpx plumbing for channel clients."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

DEFAULT_TIMEOUT = 10.0


class HttpChannelClient:
    """Base for clients that may share one httpx.AsyncClient across the engine."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._shared_http = http_client
        self._timeout = timeout

    @asynccontextmanager
    async def _http_cm(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield shared HTTP client or a short-lived one (connection reuse when shared)."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client


def describe_http_error(exc: httpx.HTTPError) -> str:
    """Short error text for a failed request (status code when there is a response)."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}: {exc.response.text[:200]}"
    if isinstance(exc, httpx.TimeoutException):
        return f"timeout: {exc.__class__.__name__}"
    return str(exc) or exc.__class__.__name__
