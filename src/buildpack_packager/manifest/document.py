"""Raw, order-preserving manifest document.

``ManifestDocument`` keeps the on-disk ``manifest.yml`` as the generic
mapping PyYAML produced, so keys this package does not model (``url_to_dependency_map``,
``exclude_files``, vendor extensions) and their order survive a
load -> mutate -> write cycle. Known fields are reached through typed
accessors that raise :class:`ManifestCastError` instead of coercing a field
with an unexpected shape.

Usage::

    document = ManifestDocument.load(staged_dir / MANIFEST_FILENAME)
    view = document.view()
    document.stack = "cflinuxfs3"
    document.set_dependencies(document.dependencies()[:1])
    document.write()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from buildpack_packager.core.errors import ManifestCastError, ManifestSchemaError
from buildpack_packager.manifest.models import ManifestView

MANIFEST_FILENAME = "manifest.yml"


class ManifestDocument:
    """Generic key-ordered manifest mapping with typed accessors."""

    def __init__(self, data: dict[str, Any], path: Path | None = None) -> None:
        if not isinstance(data, dict):
            raise ManifestCastError("manifest", "mapping", data)
        self._data = data
        self.path = path

    # -- loading / writing ---------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> ManifestDocument:
        """Read and parse a manifest file.

        Raises
        ------
        ManifestSchemaError
            If the file is not valid YAML.
        ManifestCastError
            If the document is not a mapping.
        """
        manifest_path = Path(path)
        content = manifest_path.read_text(encoding="utf-8")
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestSchemaError(
                f"Invalid YAML in {manifest_path}: {e}",
                field="manifest",
                cause=e,
            ).with_context(path=str(manifest_path)) from e
        return cls({} if data is None else data, path=manifest_path)

    def write(self, path: str | Path | None = None) -> Path:
        """Serialize the document back to disk, keeping key order."""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("ManifestDocument has no path to write to")
        with open(target, "w", encoding="utf-8") as fh:
            yaml.safe_dump(self._data, fh, sort_keys=False, default_flow_style=False, allow_unicode=True)
        return target

    # -- generic access ------------------------------------------------------

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # -- typed accessors -----------------------------------------------------

    @property
    def stack(self) -> str | None:
        value = self._data.get("stack")
        if value is not None and not isinstance(value, str):
            raise ManifestCastError("stack", "string", value)
        return value

    @stack.setter
    def stack(self, value: str) -> None:
        self._data["stack"] = value

    def dependencies(self) -> list[Any]:
        """The raw ``dependencies`` sequence (the live list, not a copy).

        A manifest without the key has no dependencies.
        """
        if "dependencies" not in self._data:
            return []
        value = self._data["dependencies"]
        if not isinstance(value, list):
            raise ManifestCastError("dependencies", "list", value)
        return value

    def dependency_entry(self, index: int) -> dict[str, Any]:
        """The raw mapping at ``dependencies[index]``."""
        entry = self.dependencies()[index]
        if not isinstance(entry, dict):
            raise ManifestCastError(f"dependencies[{index}]", "mapping", entry)
        return entry

    def set_dependencies(self, entries: list[dict[str, Any]]) -> None:
        self._data["dependencies"] = list(entries)

    def view(self) -> ManifestView:
        """Build the typed view from this document.

        Every dependency entry is shape-checked first so a malformed entry
        surfaces as a cast failure naming its index.
        """
        for index in range(len(self.dependencies())):
            self.dependency_entry(index)
        return ManifestView.from_mapping(self._data)


def load_manifest(directory: str | Path) -> tuple[ManifestDocument, ManifestView]:
    """Load the document and its typed view from ``<directory>/manifest.yml``."""
    document = ManifestDocument.load(Path(directory) / MANIFEST_FILENAME)
    return document, document.view()
