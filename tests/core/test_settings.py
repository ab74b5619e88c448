"""Tests for PackagerSettings and the cached settings factory."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from buildpack_packager.core.config import LogFormat, PackagerSettings, clear_settings_cache, get_settings
from buildpack_packager.core.errors import ConfigError, ErrorCategory


class TestPackagerSettings:
    def test_cache_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_CACHE_DIR", str(tmp_path / "c"))
        assert PackagerSettings().cache_dir == tmp_path / "c"

    def test_default_cache_dir_under_home(self, monkeypatch):
        monkeypatch.delenv("BUILDPACK_PACKAGER_CACHE_DIR", raising=False)
        settings = PackagerSettings(_env_file=None)
        assert settings.cache_dir == Path.home() / ".buildpack-packager" / "cache"

    def test_cache_dir_expands_user(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_CACHE_DIR", "~/bp-cache")
        assert PackagerSettings().cache_dir == Path.home() / "bp-cache"

    def test_defaults(self):
        settings = PackagerSettings()
        assert settings.http_timeout_seconds == 30.0
        assert settings.log_level == "INFO"
        assert settings.log_format == LogFormat.CONSOLE

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_LOG_LEVEL", "debug")
        assert PackagerSettings().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            PackagerSettings()

    def test_timeout_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_HTTP_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            PackagerSettings()

    def test_json_log_format(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_LOG_FORMAT", "json")
        assert PackagerSettings().log_format == LogFormat.JSON


class TestGetSettings:
    def test_is_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload_reads_env_again(self, tmp_path, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("BUILDPACK_PACKAGER_CACHE_DIR", str(tmp_path / "other"))
        assert get_settings() is first
        reloaded = get_settings(_force_reload=True)
        assert reloaded.cache_dir == tmp_path / "other"

    def test_invalid_value_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_HTTP_TIMEOUT_SECONDS", "-1")
        with pytest.raises(ConfigError) as exc_info:
            get_settings()

        err = exc_info.value
        assert err.category == ErrorCategory.CONFIG
        assert err.context.field == "http_timeout_seconds"
        assert isinstance(err.cause, ValidationError)

    def test_failed_load_is_not_cached(self, monkeypatch):
        monkeypatch.setenv("BUILDPACK_PACKAGER_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigError):
            get_settings()
        monkeypatch.setenv("BUILDPACK_PACKAGER_LOG_LEVEL", "info")
        assert get_settings().log_level == "INFO"

    def test_clear_cache(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
