from __future__ import annotations

from typing import Any, Callable, Mapping

import pytest

from acm_client import config
from acm_client.transport import TransportError

_ENV_VARS = (
    "ACM_ENDPOINT",
    "ACM_ACCESS_KEY",
    "ACM_SECRET_KEY",
    "ACM_ECS_RAM_ROLE",
    "ACM_NAMESPACE",
    "ACM_DATA_ID",
    "ACM_GROUP",
    "ACM_CREDENTIAL_EXPIRY_BUFFER_SECONDS",
    "ACM_HTTP_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "LOG_FILE",
)


class FakeTransport:
    """Records requests and answers from a per-URL route table.

    A route is a ``(status, body)`` tuple, an exception instance to raise, or
    a callable taking ``(headers, query)`` and returning either of those.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._routes: dict[str, Any] = {}

    def route(self, url: str, response: Any) -> None:
        self._routes[url] = response

    def do(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
    ) -> tuple[int, str]:
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": dict(headers or {}),
                "query": dict(query or {}),
            }
        )
        if url not in self._routes:
            raise TransportError(f"{method} {url} returned HTTP 404", status_code=404)
        response = self._routes[url]
        if callable(response) and not isinstance(response, BaseException):
            response = response(dict(headers or {}), dict(query or {}))
        if isinstance(response, BaseException):
            raise response
        return response

    def calls_to(self, url: str) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["url"] == url]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fixed_clock() -> Callable[[], int]:
    return lambda: 1_700_000_000_000


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()
