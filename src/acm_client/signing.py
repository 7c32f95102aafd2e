"""Request signing for the config endpoint."""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Callable

from acm_client.utils.time import epoch_millis


@dataclass(frozen=True)
class Signature:
    timestamp: int
    value: str


def compute_signature(namespace: str, group: str, timestamp: int, secret_key: str) -> str:
    """Base64 HMAC-SHA1 over ``"{namespace}+{group}+{timestamp}"``."""
    message = f"{namespace}+{group}+{timestamp}".encode("utf-8")
    digest = hmac.new(secret_key.encode("utf-8"), message, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class RequestSigner:
    """Signs one group fetch with a fresh millisecond timestamp."""

    def __init__(self, clock: Callable[[], int] = epoch_millis) -> None:
        self._clock = clock

    def sign(self, namespace: str, group: str, secret_key: str) -> Signature:
        timestamp = self._clock()
        return Signature(
            timestamp=timestamp,
            value=compute_signature(namespace, group, timestamp, secret_key),
        )
