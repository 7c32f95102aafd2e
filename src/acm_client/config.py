"""Configuration management for the ACM config client."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class HttpSettings(BaseModel):
    timeout_seconds: float = Field(default=5.0, gt=0, le=300)


class AcmSettings(BaseModel):
    """Inputs for a pull.

    ``group`` is a comma-separated list; tokens are used exactly as written.
    Static keys win over ``ecs_ram_role`` when both are set.
    """

    endpoint: str = Field(default="acm.aliyun.com")
    access_key: str = Field(default="", repr=False)
    secret_key: str = Field(default="", repr=False)
    ecs_ram_role: str = Field(default="")
    namespace: str = Field(default="")
    data_id: str = Field(default="")
    group: str = Field(default="")
    credential_expiry_buffer_seconds: int = Field(default=60, ge=0, le=3600)

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate:
            raise ValueError("endpoint must not be empty")
        if "://" in candidate or "/" in candidate:
            raise ValueError("endpoint must be a bare host name")
        return candidate


class Settings(BaseModel):
    acm: AcmSettings = Field(default_factory=AcmSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_KEYS = {
    "endpoint": "ACM_ENDPOINT",
    "access_key": "ACM_ACCESS_KEY",
    "secret_key": "ACM_SECRET_KEY",
    "ecs_ram_role": "ACM_ECS_RAM_ROLE",
    "namespace": "ACM_NAMESPACE",
    "data_id": "ACM_DATA_ID",
    "group": "ACM_GROUP",
    "credential_expiry_buffer_seconds": "ACM_CREDENTIAL_EXPIRY_BUFFER_SECONDS",
    "http_timeout": "ACM_HTTP_TIMEOUT_SECONDS",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
}


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    return default if value is None else value


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    defaults = AcmSettings()

    settings_data: dict[str, object] = {
        "acm": {
            "endpoint": _env_str(ENV_KEYS["endpoint"], defaults.endpoint),
            "access_key": _env_str(ENV_KEYS["access_key"], defaults.access_key),
            "secret_key": _env_str(ENV_KEYS["secret_key"], defaults.secret_key),
            "ecs_ram_role": _env_str(ENV_KEYS["ecs_ram_role"], defaults.ecs_ram_role),
            "namespace": _env_str(ENV_KEYS["namespace"], defaults.namespace),
            "data_id": _env_str(ENV_KEYS["data_id"], defaults.data_id),
            "group": _env_str(ENV_KEYS["group"], defaults.group),
            "credential_expiry_buffer_seconds": _env_int(
                ENV_KEYS["credential_expiry_buffer_seconds"],
                defaults.credential_expiry_buffer_seconds,
            ),
        },
        "http": {
            "timeout_seconds": _env_float(
                ENV_KEYS["http_timeout"], HttpSettings().timeout_seconds
            ),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": os.getenv(ENV_KEYS["log_file"]) or None,
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
