"""Per-role credential cache with expiry-aware refresh."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from acm_client.utils.masking import mask_value
from acm_client.utils.time import utc_now

DEFAULT_EXPIRY_BUFFER_SECONDS = 60


@dataclass(frozen=True)
class Credentials:
    """Access credentials, either static or issued for a RAM role."""

    access_key: str
    secret_key: str
    security_token: str | None = None
    expiration: datetime | None = None

    def __repr__(self) -> str:
        expiration = self.expiration.isoformat() if self.expiration else None
        return (
            f"Credentials(access_key={mask_value(self.access_key)}, "
            f"expiration={expiration})"
        )

    @property
    def is_dynamic(self) -> bool:
        return self.security_token is not None

    def is_expiring_soon(self, buffer_seconds: int, now: datetime | None = None) -> bool:
        """Static keys never expire; issued credentials without an expiry are always stale."""
        if self.expiration is None:
            return self.is_dynamic
        exp = self.expiration
        if exp.tzinfo is None:
            exp = exp.replace(tzinfo=timezone.utc)
        current = now or utc_now()
        return current > exp - timedelta(seconds=buffer_seconds)


class CredentialCache:
    """Thread-safe mapping of role name to credentials.

    Entries live for the life of the cache and are only replaced by a refresh.
    The lock is held across a refresh so concurrent callers for the same role
    do not issue duplicate metadata requests.
    """

    def __init__(
        self,
        buffer_seconds: int = DEFAULT_EXPIRY_BUFFER_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._buffer_seconds = buffer_seconds
        self._clock = clock
        self._entries: dict[str, Credentials] = {}
        self._lock = threading.Lock()

    def get(self, role: str) -> Credentials | None:
        """Return the cached entry for ``role`` if it is still usable."""
        with self._lock:
            return self._usable(role)

    def get_or_refresh(
        self,
        role: str,
        refresh_fn: Callable[[], Credentials | None],
    ) -> Credentials | None:
        with self._lock:
            cached = self._usable(role)
            if cached is not None:
                return cached

            creds = refresh_fn()
            if creds is not None:
                self._entries[role] = creds
            return creds

    def _usable(self, role: str) -> Credentials | None:
        entry = self._entries.get(role)
        if entry is None:
            return None
        if entry.is_expiring_soon(self._buffer_seconds, now=self._clock()):
            return None
        return entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
