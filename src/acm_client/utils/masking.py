"""Masking helpers for secrets that end up in logs or reprs."""

from __future__ import annotations

SENSITIVE_KEY_MARKERS: list[str] = [
    "secret",
    "token",
    "signature",
    "accesskey",
]


def mask_value(value: str, *, keep: int = 4, mask: str = "***") -> str:
    """Keep a short prefix of ``value`` and mask the rest."""
    if not value:
        return ""
    if len(value) <= keep:
        return mask
    return value[:keep] + mask


def redact_headers(headers: dict[str, str], *, mask: str = "***") -> dict[str, str]:
    """Return a copy of ``headers`` with credential-bearing values masked.

    Keys are matched by substring against ``SENSITIVE_KEY_MARKERS``
    (case-insensitive, dashes ignored).
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        normalized = key.lower().replace("-", "")
        if any(marker in normalized for marker in SENSITIVE_KEY_MARKERS):
            redacted[key] = mask
        else:
            redacted[key] = value
    return redacted
