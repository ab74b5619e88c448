"""
Dependency fetcher: content-addressed cache of verified dependency files.

Given a dependency (URI + expected SHA-256) and a cache root, the fetcher
returns a :class:`~buildpack_packager.packaging.models.File` for the cached
copy, downloading it first if it is absent.

Manifesto:
    A cached file is never trusted blindly. The checksum is recomputed on
    every call, so a truncated download, a corrupted disk or a forged cache
    entry is caught on every use and not only at download time. Downloads
    land in a temporary file next to their final location and are renamed
    into place only once complete, so concurrent runs sharing a cache never
    observe each other's partial writes.

Architecture:
    ::

        fetch(dependency, cache_root)
            │
            ├── name = dependencies/<md5(uri)>/<basename(uri)>
            │
            ├── cache_root/name missing?
            │       ├── file://  → copy local file
            │       └── http(s)  → httpx GET (non-2xx → DownloadError)
            │       └── tmp file → os.replace into place
            │
            ├── sha256(cache_root/name) == dependency.sha256 ?
            │       └── no → ChecksumMismatchError
            │
            └── File(name, cache_root/name)

Examples:
    >>> with DependencyFetcher() as fetcher:
    ...     file = fetcher.fetch(dependency, Path("~/.buildpack-packager/cache").expanduser())
    >>> file.name
    'dependencies/4f2c.../ruby-2.7.1.tgz'

Guardrails:
    ❌ DON'T: Skip verification because the file is already cached
    ✅ DO: Recompute the digest on every fetch

    ❌ DON'T: Write downloads straight to the cache path
    ✅ DO: Stream to a temp file and rename on success

Tags:
    packaging, cache, download, httpx, sha256, integrity
"""

from __future__ import annotations

import os
import posixpath
import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import BinaryIO
from urllib.parse import unquote, urlsplit

import httpx

from buildpack_packager.core.config import get_settings
from buildpack_packager.core.errors import ChecksumMismatchError, DownloadError
from buildpack_packager.core.hashing import digests_equal, sha256_file, uri_digest
from buildpack_packager.core.logging import get_logger
from buildpack_packager.manifest.models import Dependency
from buildpack_packager.packaging.models import File

logger = get_logger(__name__)

CACHE_SUBDIR = "dependencies"
CACHED_FILE_MODE = 0o644


def cache_name(uri: str) -> str:
    """Cache-relative (and archive-relative) name for a dependency URI."""
    basename = posixpath.basename(unquote(urlsplit(uri).path))
    if basename in {"", ".", ".."}:
        basename = "dependency"
    return posixpath.join(CACHE_SUBDIR, uri_digest(uri), basename)


class DependencyFetcher:
    """Download, cache and verify dependency artifacts.

    Parameters
    ----------
    client:
        HTTP client to use. When omitted the fetcher creates its own on first
        download and closes it in :meth:`close`.
    timeout:
        Seconds for HTTP operations. Defaults to
        ``get_settings().http_timeout_seconds``.
    """

    def __init__(self, client: httpx.Client | None = None, *, timeout: float | None = None) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout if timeout is not None else get_settings().http_timeout_seconds

    def __enter__(self) -> DependencyFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    # -- public API ----------------------------------------------------------

    def fetch(self, dependency: Dependency, cache_root: str | Path) -> File:
        """Return the verified cached file for ``dependency``.

        Raises
        ------
        DownloadError
            Transport failure or non-2xx response.
        ChecksumMismatchError
            The cached file's SHA-256 differs from ``dependency.sha256``.
        OSError
            Filesystem failures, including a missing ``file://`` source.
        """
        name = cache_name(dependency.uri)
        target = Path(cache_root).absolute() / name
        log = logger.bind(uri=dependency.uri, cache_path=str(target))

        if target.exists():
            log.debug("dependency.cache_hit")
        else:
            self._download(dependency.uri, target)
            log.info("dependency.downloaded", size_bytes=target.stat().st_size)

        actual = sha256_file(target)
        if not digests_equal(dependency.sha256, actual):
            log.error("dependency.checksum_mismatch", expected=dependency.sha256, actual=actual)
            raise ChecksumMismatchError(
                str(target), expected=dependency.sha256, actual=actual, uri=dependency.uri
            )
        log.debug("dependency.verified", sha256=actual)

        return File(name=name, path=target)

    # -- internal helpers ----------------------------------------------------

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self._client

    def _download(self, uri: str, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as output:
                self._copy_into(uri, output)
            os.chmod(tmp_name, CACHED_FILE_MODE)
            os.replace(tmp_name, target)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def _copy_into(self, uri: str, output: BinaryIO) -> None:
        parts = urlsplit(uri)
        if parts.scheme == "file":
            with open(unquote(parts.path), "rb") as source:
                shutil.copyfileobj(source, output)
            return

        try:
            with self._http().stream("GET", uri) as response:
                if not response.is_success:
                    raise DownloadError(uri, http_status=response.status_code)
                for chunk in response.iter_bytes():
                    output.write(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DownloadError(uri, cause=e) from e
