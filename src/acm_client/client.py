"""Pull entry point: discover servers, resolve credentials, fetch and merge groups."""

from __future__ import annotations

import logging
import random
from typing import Any

from acm_client.config import AcmSettings, load_settings
from acm_client.credentials.cache import CredentialCache
from acm_client.credentials.provider import CredentialProvider
from acm_client.errors import InvalidTransportError
from acm_client.fetcher import FetchResult, FetchStatus, GroupConfigFetcher
from acm_client.servers import ServerListResolver
from acm_client.signing import RequestSigner
from acm_client.transport import HttpTransport, HttpxTransport

logger = logging.getLogger(__name__)


def split_groups(value: str) -> list[str]:
    """Split the configured group list on commas, keeping tokens verbatim."""
    if not value:
        return []
    return value.split(",")


class AcmClient:
    """Pulls configuration from ACM.

    The server list and RAM credentials are cached on the instance and reused
    across ``pull()`` calls. Group fetches run in list order and later groups
    overwrite earlier keys.
    """

    def __init__(
        self,
        settings: AcmSettings | None = None,
        transport: HttpTransport | None = None,
        *,
        signer: RequestSigner | None = None,
        rng: random.Random | None = None,
        credential_cache: CredentialCache | None = None,
    ) -> None:
        if settings is None:
            settings = load_settings().acm
        self._owned_transport: HttpxTransport | None = None
        if transport is None:
            transport = HttpxTransport(timeout_seconds=load_settings().http.timeout_seconds)
            self._owned_transport = transport

        self._settings = settings
        self._transport = transport
        self._servers = ServerListResolver(transport)
        if credential_cache is None:
            credential_cache = CredentialCache(
                buffer_seconds=settings.credential_expiry_buffer_seconds
            )
        self._credentials = CredentialProvider(transport, credential_cache)
        self._fetcher = GroupConfigFetcher(transport, signer=signer, rng=rng)

    @property
    def settings(self) -> AcmSettings:
        return self._settings

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owned_transport is not None:
            self._owned_transport.close()

    def __enter__(self) -> "AcmClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def pull(self) -> dict[str, Any]:
        """
        Fetch every configured group and merge the results.

        Returns:
            Merged mapping; empty when no group is configured

        Raises:
            InvalidTransportError: If the transport cannot issue requests
            ServerDiscoveryError: If the server list cannot be fetched
            CredentialError: If RAM role credentials cannot be fetched
        """
        merged: dict[str, Any] = {}
        for result in self.fetch_groups():
            if result.ok:
                merged.update(result.entries)
        return merged

    def fetch_groups(self) -> list[FetchResult]:
        """Fetch each configured group in order, returning one result per group."""
        if not callable(getattr(self._transport, "do", None)):
            raise InvalidTransportError()

        settings = self._settings
        if not settings.group:
            return []

        servers = self._servers.ensure(settings.endpoint)
        credentials = self._credentials.resolve(
            settings.access_key,
            settings.secret_key,
            settings.ecs_ram_role,
        )

        results = []
        for group in split_groups(settings.group):
            results.append(
                self._fetcher.fetch(
                    group,
                    settings.namespace,
                    settings.data_id,
                    credentials,
                    servers,
                )
            )

        failed = [
            result.group
            for result in results
            if result.status not in (FetchStatus.OK, FetchStatus.EMPTY)
        ]
        if failed:
            logger.info("Pulled %d groups, %d skipped: %s", len(results), len(failed), failed)
        return results
