"""Single-group config fetch with per-group failure classification."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from acm_client.credentials.provider import ResolvedCredentials
from acm_client.servers import SERVER_PORT
from acm_client.signing import RequestSigner
from acm_client.transport import HttpTransport, TransportError
from acm_client.utils.masking import redact_headers

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"
    BAD_STATUS = "bad_status"
    DECODE_ERROR = "decode_error"
    NO_SERVER = "no_server"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one group fetch. Only ``OK`` carries entries."""

    group: str
    status: FetchStatus
    entries: dict[str, Any] = field(default_factory=dict)
    server: str | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


def config_url(server: str) -> str:
    return f"http://{server}:{SERVER_PORT}/diamond-server/config.co"


class GroupConfigFetcher:
    """Fetches one configuration group from a randomly chosen server."""

    def __init__(
        self,
        transport: HttpTransport,
        signer: RequestSigner | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._transport = transport
        self._signer = signer or RequestSigner()
        self._rng = rng or random.Random()

    def build_request(
        self,
        group: str,
        namespace: str,
        data_id: str,
        credentials: ResolvedCredentials,
    ) -> tuple[dict[str, str], dict[str, str]]:
        """Return ``(headers, query)`` for a signed config request."""
        signature = self._signer.sign(namespace, group, credentials.secret_key)
        headers = {
            "Spas-AccessKey": credentials.access_key,
            "timeStamp": str(signature.timestamp),
            "Spas-Signature": signature.value,
            "Content-Type": CONTENT_TYPE,
        }
        headers.update(credentials.security_headers)
        query = {
            "tenant": namespace,
            "dataId": data_id,
            "group": group,
        }
        return headers, query

    def fetch(
        self,
        group: str,
        namespace: str,
        data_id: str,
        credentials: ResolvedCredentials,
        servers: Sequence[str],
    ) -> FetchResult:
        if not servers:
            logger.error("No server available to fetch config group [%s]", group)
            return FetchResult(group=group, status=FetchStatus.NO_SERVER)

        server = self._rng.choice(list(servers))
        headers, query = self.build_request(group, namespace, data_id, credentials)
        logger.debug(
            "Fetching config group [%s] from %s headers=%s",
            group,
            server,
            redact_headers(headers),
        )

        try:
            status, body = self._transport.do("GET", config_url(server), headers, query)
        except TransportError as exc:
            if exc.status_code == 404:
                logger.warning("Config group [%s] does not exist", group)
                return FetchResult(group=group, status=FetchStatus.NOT_FOUND, server=server)
            logger.error("Get config group [%s] from %s failed: %s", group, server, exc)
            return FetchResult(
                group=group,
                status=FetchStatus.TRANSPORT_ERROR,
                server=server,
                detail=str(exc),
            )

        if status != 200:
            logger.error("Get config group [%s] failed: HTTP %s from %s", group, status, server)
            return FetchResult(
                group=group,
                status=FetchStatus.BAD_STATUS,
                server=server,
                detail=f"HTTP {status}",
            )

        if not body:
            return FetchResult(group=group, status=FetchStatus.EMPTY, server=server)

        try:
            entries = json.loads(body)
        except ValueError as exc:
            logger.error("Config group [%s] returned invalid JSON: %s", group, exc)
            return FetchResult(
                group=group,
                status=FetchStatus.DECODE_ERROR,
                server=server,
                detail=str(exc),
            )

        if not isinstance(entries, dict):
            logger.error(
                "Config group [%s] returned %s, expected an object",
                group,
                type(entries).__name__,
            )
            return FetchResult(
                group=group,
                status=FetchStatus.DECODE_ERROR,
                server=server,
                detail=f"unexpected {type(entries).__name__}",
            )

        if not entries:
            return FetchResult(group=group, status=FetchStatus.EMPTY, server=server)
        return FetchResult(group=group, status=FetchStatus.OK, entries=entries, server=server)
