"""Pull-only client for the Aliyun ACM configuration service."""

from acm_client.client import AcmClient, split_groups
from acm_client.errors import (
    AcmError,
    CredentialError,
    InvalidTransportError,
    ServerDiscoveryError,
)
from acm_client.fetcher import FetchResult, FetchStatus

__all__ = [
    "AcmClient",
    "AcmError",
    "CredentialError",
    "FetchResult",
    "FetchStatus",
    "InvalidTransportError",
    "ServerDiscoveryError",
    "split_groups",
]
