"""
Centralized settings for the buildpack packager.

Manifesto:
    The cache location, HTTP timeout and logging options are read from one
    validated, cached settings object instead of being parsed ad-hoc by
    each module. Every field can be set through a ``BUILDPACK_PACKAGER_*``
    environment variable or a ``.env`` file.

Tags:
    configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildpack_packager.core.errors import ConfigError


def _default_cache_dir() -> Path:
    return Path.home() / ".buildpack-packager" / "cache"


class LogFormat(str, Enum):
    """Rendering for structured logs."""

    CONSOLE = "console"
    JSON = "json"


class PackagerSettings(BaseSettings):
    """Packager configuration.

    All fields can be set via ``BUILDPACK_PACKAGER_*`` environment variables
    (e.g. ``BUILDPACK_PACKAGER_CACHE_DIR=/var/cache/bp``).
    """

    model_config = SettingsConfigDict(
        env_prefix="BUILDPACK_PACKAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Cache ────────────────────────────────────────────────────
    cache_dir: Path = Field(
        default_factory=_default_cache_dir,
        description="Content-addressed store for downloaded dependencies",
    )

    # ── HTTP ─────────────────────────────────────────────────────
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("cache_dir")
    @classmethod
    def _expand_cache_dir(cls, v: Path) -> Path:
        return v.expanduser()


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, PackagerSettings] = {}


def get_settings(*, _force_reload: bool = False) -> PackagerSettings:
    """Load, validate, and cache a :class:`PackagerSettings` instance.

    Parameters
    ----------
    _force_reload:
        Bypass cache and reload from the environment.

    Raises
    ------
    ConfigError
        A ``BUILDPACK_PACKAGER_*`` value failed validation.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = PackagerSettings()
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError(
            f"Invalid setting `{field}`: {first['msg']}",
            cause=e,
        ).with_context(field=field) from e
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
