"""BuildpackPackager: turn a buildpack source directory into a release zip.

Pipeline::

    validate stack ─► stage ─► VERSION ─► pre_package ─► transform manifest ─► zip
                                                           (+ fetch deps)

The produced archive is ``<language>_buildpack[-cached]-v<version>.zip``
in the source directory. It contains the manifest's ``included_files``
(read from the staged copy, so ``VERSION`` and the rewritten
``manifest.yml`` are the ones that ship) and, for cached archives, every
retained dependency under ``dependencies/<hash>/<basename>``.

Extension buildpacks still use the Ruby ``buildpack-packager`` gem;
:meth:`BuildpackPackager.compile_extension` stages the directory, runs the
gem there and copies its archive back.

Limitations:
- Dependencies are fetched one at a time
- No timeout is applied to ``pre_package`` or the legacy gem
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from buildpack_packager.core.config import PackagerSettings, get_settings
from buildpack_packager.core.errors import LegacyPackagerError, PrePackageError
from buildpack_packager.core.logging import get_logger
from buildpack_packager.manifest.document import load_manifest
from buildpack_packager.manifest.validation import validate_stack
from buildpack_packager.packaging.archive import build_archive
from buildpack_packager.packaging.fetcher import DependencyFetcher
from buildpack_packager.packaging.stager import StagingDirectory
from buildpack_packager.packaging.transformer import ManifestTransformer

logger = get_logger(__name__)

VERSION_FILENAME = "VERSION"
LEGACY_GEMFILE = "cf.Gemfile"


def archive_name(language: str, version: str, cached: bool) -> str:
    """``ruby_buildpack-v1.2.3.zip`` / ``ruby_buildpack-cached-v1.2.3.zip``."""
    if cached:
        return f"{language}_buildpack-cached-v{version}.zip"
    return f"{language}_buildpack-v{version}.zip"


def write_version(directory: Path, version: str) -> Path:
    """Write the literal version string (no trailing newline) to ``VERSION``."""
    path = directory / VERSION_FILENAME
    path.write_text(version, encoding="utf-8")
    return path


def run_pre_package(command: str, staged_dir: Path) -> str:
    """Run the manifest's ``pre_package`` hook inside the staged directory.

    A relative command that exists in the staged directory is run from
    there; anything else is looked up on ``PATH``.

    Returns
    -------
    Combined stdout/stderr of the hook.

    Raises
    ------
    PrePackageError
        Non-zero exit status. The combined output is attached.
    """
    executable = command
    local = staged_dir / command
    if not os.path.isabs(command) and local.exists():
        executable = str(local)

    result = subprocess.run(
        [executable],
        cwd=staged_dir,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        check=False,
    )
    if result.returncode != 0:
        logger.error("prepackage.failed", command=command, exit_code=result.returncode, output=result.stdout)
        raise PrePackageError(command, result.returncode, result.stdout)

    logger.debug("prepackage.completed", command=command, output=result.stdout)
    return result.stdout


class BuildpackPackager:
    """Package a buildpack directory into a versioned zip archive.

    Example::

        packager = BuildpackPackager(cache_dir="/var/cache/buildpacks")
        path = packager.package("ruby-buildpack", "1.2.3", stack="cflinuxfs3", cached=True)

    Parameters
    ----------
    cache_dir:
        Dependency cache root. Defaults to ``settings.cache_dir``.
    fetcher:
        Dependency fetcher to use. When omitted a fetcher is created per
        run and closed when the run ends.
    settings:
        Settings override (mostly for tests).
    """

    def __init__(
        self,
        *,
        cache_dir: str | Path | None = None,
        fetcher: DependencyFetcher | None = None,
        settings: PackagerSettings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.cache_dir = Path(cache_dir) if cache_dir is not None else self._settings.cache_dir
        self._fetcher = fetcher

    # -- public API ----------------------------------------------------------

    def package(
        self,
        source_dir: str | Path,
        version: str,
        *,
        stack: str = "",
        cached: bool = False,
    ) -> Path:
        """Build the archive and return its absolute path.

        Raises
        ------
        StackNotFoundError, MissingDefaultDependencyError
            ``stack`` cannot be packaged from this manifest.
        PrePackageError
            The ``pre_package`` hook failed.
        DownloadError, ChecksumMismatchError
            A dependency could not be fetched or verified (cached only).
        ManifestCastError, ManifestSchemaError
            The manifest has fields of an unexpected shape.
        """
        source = Path(source_dir).resolve()
        log = logger.bind(source=str(source), version=version, stack=stack or None, cached=cached)

        if stack:
            _, source_view = load_manifest(source)
            validate_stack(source_view, stack)

        with StagingDirectory(source) as staged:
            write_version(staged, version)

            _, view = load_manifest(staged)
            if view.pre_package:
                run_pre_package(view.pre_package, staged)

            fetcher = self._fetcher or DependencyFetcher(timeout=self._settings.http_timeout_seconds)
            try:
                transformer = ManifestTransformer(fetcher, self.cache_dir)
                files = transformer.transform(staged, stack, include_cache=cached)
            finally:
                if self._fetcher is None:
                    fetcher.close()

            archive_path = build_archive(source / archive_name(view.language, version, cached), files)

        log.info("buildpack.packaged", archive=str(archive_path), entries=len(files))
        return archive_path

    def compile_extension(self, source_dir: str | Path, version: str, *, cached: bool = False) -> Path:
        """Package an extension buildpack with the legacy Ruby packager.

        Raises
        ------
        LegacyPackagerError
            ``bundle exec buildpack-packager`` exited non-zero.
        """
        source = Path(source_dir).resolve()
        command = ["bundle", "exec", "buildpack-packager", "--cached" if cached else "--uncached"]

        with StagingDirectory(source) as staged:
            write_version(staged, version)

            result = subprocess.run(
                command,
                cwd=staged,
                env={**os.environ, "BUNDLE_GEMFILE": LEGACY_GEMFILE},
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
            if result.returncode != 0:
                raise LegacyPackagerError(" ".join(command), result.returncode, result.stdout)
            logger.debug("legacy_packager.completed", output=result.stdout)

            _, view = load_manifest(source)
            name = archive_name(view.language, version, cached)
            destination = source / name
            shutil.copyfile(staged / name, destination)

        logger.info("buildpack.packaged", archive=str(destination), legacy=True, cached=cached)
        return destination


def package(
    source_dir: str | Path,
    cache_dir: str | Path,
    version: str,
    stack: str = "",
    cached: bool = False,
) -> Path:
    """Functional shortcut for :meth:`BuildpackPackager.package`."""
    return BuildpackPackager(cache_dir=cache_dir).package(source_dir, version, stack=stack, cached=cached)


def compile_extension_package(source_dir: str | Path, version: str, cached: bool = False) -> Path:
    """Functional shortcut for :meth:`BuildpackPackager.compile_extension`."""
    return BuildpackPackager().compile_extension(source_dir, version, cached=cached)
