"""Credential resolution: static keys or ECS RAM role credentials.

RAM role credentials come from the ECS instance-metadata service and carry a
security token and an expiration. They are cached per role and refreshed once
they are within the expiry buffer.

See https://help.aliyun.com/document_detail/72013.html and
https://help.aliyun.com/document_detail/54579.html
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from acm_client.credentials.cache import Credentials, CredentialCache
from acm_client.errors import CredentialError
from acm_client.transport import HttpTransport, TransportError
from acm_client.utils.masking import mask_value
from acm_client.utils.time import parse_utc

logger = logging.getLogger(__name__)

METADATA_CREDENTIALS_URL = "http://100.100.100.200/latest/meta-data/ram/security-credentials/"
SECURITY_TOKEN_HEADER = "Spas-SecurityToken"


@dataclass(frozen=True)
class ResolvedCredentials:
    """Keys used to sign a pull, plus headers for dynamic credentials."""

    access_key: str
    secret_key: str
    security_headers: dict[str, str] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"ResolvedCredentials(access_key={mask_value(self.access_key)}, "
            f"security_headers={sorted(self.security_headers)})"
        )


class CredentialProvider:
    """Resolves the credentials a pull should sign with."""

    def __init__(self, transport: HttpTransport, cache: CredentialCache | None = None) -> None:
        self._transport = transport
        self._cache = cache if cache is not None else CredentialCache()

    @property
    def cache(self) -> CredentialCache:
        return self._cache

    def resolve(self, access_key: str, secret_key: str, ram_role: str) -> ResolvedCredentials:
        """
        Pick static keys when an access key is configured, else RAM role
        credentials, else empty keys.

        Raises:
            CredentialError: If the metadata service cannot issue credentials
        """
        if access_key:
            return ResolvedCredentials(access_key=access_key, secret_key=secret_key)

        if ram_role:
            creds = self.credentials_for(ram_role)
            if creds is not None:
                return ResolvedCredentials(
                    access_key=creds.access_key,
                    secret_key=creds.secret_key,
                    security_headers={SECURITY_TOKEN_HEADER: creds.security_token or ""},
                )

        # Unauthenticated: signing still runs with an empty secret.
        return ResolvedCredentials(access_key=access_key, secret_key=secret_key)

    def credentials_for(self, ram_role: str) -> Credentials | None:
        return self._cache.get_or_refresh(ram_role, lambda: self._fetch(ram_role))

    def _fetch(self, ram_role: str) -> Credentials | None:
        url = METADATA_CREDENTIALS_URL + ram_role
        try:
            status, body = self._transport.do("GET", url)
        except TransportError as exc:
            logger.error("RAM credential request failed: role=%s, error=%s", ram_role, exc)
            raise CredentialError(
                f"Get security credentials failed for RAM role {ram_role}.",
                role=ram_role,
                status_code=exc.status_code,
            ) from exc

        if status != 200:
            raise CredentialError(
                f"Get security credentials failed for RAM role {ram_role}.",
                role=ram_role,
                status_code=status,
            )

        try:
            payload = json.loads(body) if body else {}
        except ValueError as exc:
            raise CredentialError(
                f"Invalid security credentials payload for RAM role {ram_role}.",
                role=ram_role,
                status_code=status,
            ) from exc

        if not payload:
            logger.warning("Empty security credentials for RAM role %s", ram_role)
            return None

        creds = _parse_credentials(payload, ram_role)
        logger.info("Refreshed RAM credentials: role=%s, %r", ram_role, creds)
        return creds


def _parse_credentials(payload: Any, ram_role: str) -> Credentials:
    if not isinstance(payload, dict):
        raise CredentialError(
            f"Invalid security credentials payload for RAM role {ram_role}.",
            role=ram_role,
        )
    token = payload.get("SecurityToken")
    if not isinstance(token, str) or not token:
        raise CredentialError(
            f"Missing SecurityToken in credentials for RAM role {ram_role}.",
            role=ram_role,
        )
    try:
        expiration_raw = payload.get("Expiration")
        return Credentials(
            access_key=payload["AccessKeyId"],
            secret_key=payload["AccessKeySecret"],
            security_token=token,
            expiration=parse_utc(expiration_raw) if expiration_raw else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CredentialError(
            f"Invalid security credentials payload for RAM role {ram_role}: {exc}",
            role=ram_role,
        ) from exc
