"""Credential utilities."""

from acm_client.credentials.cache import Credentials, CredentialCache
from acm_client.credentials.provider import (
    CredentialProvider,
    ResolvedCredentials,
)

__all__ = [
    "CredentialCache",
    "CredentialProvider",
    "Credentials",
    "ResolvedCredentials",
]
