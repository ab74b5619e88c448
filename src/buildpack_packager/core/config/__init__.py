"""Packager configuration.

Quick start::

    from buildpack_packager.core.config import get_settings

    settings = get_settings()
    print(settings.cache_dir)   # ~/.buildpack-packager/cache

Guardrails:
    ❌ Reading ``os.environ`` ad-hoc in each module
    ✅ ``get_settings().cache_dir`` from the cached singleton
"""

from .settings import LogFormat, PackagerSettings, clear_settings_cache, get_settings

__all__ = [
    "LogFormat",
    "PackagerSettings",
    "clear_settings_cache",
    "get_settings",
]
