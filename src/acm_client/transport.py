"""HTTP transport used by the client.

The core only needs ``do(method, url, headers, query) -> (status, body)``.
``HttpxTransport`` is the default implementation; tests and embedders may pass
any object with a compatible ``do`` method.
"""

from __future__ import annotations

import logging
import threading
from typing import Mapping, Protocol

import httpx

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when an HTTP exchange fails.

    ``status_code`` is set for 4xx/5xx responses and ``None`` for network
    level failures (DNS, connect, timeout).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpTransport(Protocol):
    def do(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
    ) -> tuple[int, str]: ...


class HttpxTransport:
    """Thread-safe synchronous transport backed by ``httpx.Client``."""

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client = client
        self._lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is not None:
                return self._client
            self._client = httpx.Client(timeout=self._timeout_seconds)
            logger.debug("HTTP client initialized (timeout=%ss)", self._timeout_seconds)
            return self._client

    def do(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
    ) -> tuple[int, str]:
        client = self._get_client()
        try:
            response = client.request(
                method,
                url,
                headers=dict(headers or {}),
                params=dict(query or {}),
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        # Redirects and other non-error statuses are left to the caller.
        if response.status_code >= 400:
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.status_code, response.text

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
