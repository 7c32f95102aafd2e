"""Backend server discovery."""

from __future__ import annotations

import logging
import threading

from acm_client.errors import ServerDiscoveryError
from acm_client.transport import HttpTransport, TransportError

logger = logging.getLogger(__name__)

SERVER_PORT = 8080


def discovery_url(endpoint: str) -> str:
    return f"http://{endpoint}:{SERVER_PORT}/diamond-server/diamond"


def parse_server_list(body: str) -> list[str]:
    return [line for line in body.split("\n") if line]


class ServerListResolver:
    """Discovers the server pool once and keeps it for the resolver's lifetime.

    The list is only fetched again while it is empty, e.g. when discovery
    returned no addresses.
    """

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport
        self._servers: list[str] = []
        self._lock = threading.Lock()

    @property
    def servers(self) -> list[str]:
        return list(self._servers)

    def ensure(self, endpoint: str) -> list[str]:
        """
        Return the cached server list, discovering it first if needed.

        Raises:
            ServerDiscoveryError: If the discovery endpoint does not answer 200
        """
        with self._lock:
            if self._servers:
                return list(self._servers)

            url = discovery_url(endpoint)
            try:
                status, body = self._transport.do("GET", url)
            except TransportError as exc:
                raise ServerDiscoveryError(
                    f"Get server list failed from {endpoint}: {exc}",
                    status_code=exc.status_code,
                ) from exc

            if status != 200:
                raise ServerDiscoveryError(
                    f"Get server list failed from {endpoint}.", status_code=status
                )

            self._servers = parse_server_list(body)
            if self._servers:
                logger.info("Discovered %d servers from %s", len(self._servers), endpoint)
            else:
                logger.warning("Server discovery at %s returned no servers", endpoint)
            return list(self._servers)
