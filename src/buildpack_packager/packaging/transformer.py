"""Manifest transformer: filter a staged manifest for one stack.

Rewrites ``manifest.yml`` inside a staged buildpack so the archive only
declares the dependencies built for the target stack, and, for cached
archives, points each of them at its bundled file.

The typed view and the raw document come from the same loaded mapping, so
``view.dependencies[i]`` and ``document.dependencies()[i]`` describe the same
entry. The filter walks them together by index and keeps retained raw
entries in their original order; fields the view does not model are carried
through untouched.
"""

from __future__ import annotations

from pathlib import Path

from buildpack_packager.core.logging import get_logger
from buildpack_packager.manifest.document import load_manifest
from buildpack_packager.packaging.fetcher import DependencyFetcher
from buildpack_packager.packaging.models import File

logger = get_logger(__name__)


class ManifestTransformer:
    """Filter, annotate and rewrite a staged manifest.

    Parameters
    ----------
    fetcher:
        Used to fetch retained dependencies when ``include_cache`` is set.
    cache_dir:
        Cache root handed to the fetcher.
    """

    def __init__(self, fetcher: DependencyFetcher, cache_dir: str | Path) -> None:
        self._fetcher = fetcher
        self._cache_dir = Path(cache_dir)

    def transform(self, staged_dir: str | Path, stack: str, include_cache: bool) -> list[File]:
        """Rewrite ``<staged_dir>/manifest.yml`` for ``stack``.

        Returns the files for the archive: the declared include files
        followed by the fetched dependency files (``include_cache`` only),
        in manifest order.

        Raises
        ------
        ManifestCastError
            ``dependencies`` is not a list, or an entry is not a mapping.
        ManifestSchemaError
            A known field has the wrong type.
        """
        staged = Path(staged_dir)
        document, view = load_manifest(staged)

        files = [File(name=name, path=staged / name) for name in view.include_files]

        if stack:
            document.stack = stack

        retained = []
        for index, dependency in enumerate(view.dependencies):
            if not dependency.available_for(stack):
                continue
            entry = document.dependency_entry(index)
            if include_cache:
                file = self._fetcher.fetch(dependency, self._cache_dir)
                entry["file"] = file.name
                files.append(file)
            retained.append(entry)

        document.set_dependencies(retained)
        document.write()

        logger.info(
            "manifest.rewritten",
            stack=stack or None,
            declared=len(view.dependencies),
            retained=len(retained),
            cached=include_cache,
        )
        return files
