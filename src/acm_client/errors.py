"""Fatal error types raised out of a pull."""

from __future__ import annotations


class AcmError(Exception):
    """Base class for failures that abort a whole pull."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class InvalidTransportError(AcmError):
    """Raised when the client has no usable HTTP transport."""

    def __init__(self, message: str = "Invalid http client.") -> None:
        super().__init__(message, "invalid_transport")


class ServerDiscoveryError(AcmError):
    """Raised when the server list cannot be fetched."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, "server_discovery_failed")
        self.status_code = status_code


class CredentialError(AcmError):
    """Raised when RAM role credential acquisition fails."""

    def __init__(self, message: str, role: str, status_code: int | None = None) -> None:
        super().__init__(message, "credential_failed")
        self.role = role
        self.status_code = status_code
