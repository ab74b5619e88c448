"""
Shared pytest fixtures for buildpack-packager tests.

This module provides:
- Settings isolation (no test reads or writes ~/.buildpack-packager)
- A buildpack source tree factory
- Local ``file://`` dependency artifacts with known checksums

Usage:
    from tests._support import dependency_entry, ruby_manifest

    def test_something(make_buildpack, make_artifact, cache_dir):
        artifact = make_artifact("ruby-2.7.1.tgz", b"ruby")
        src = make_buildpack(ruby_manifest([dependency_entry(artifact, ["cflinuxfs3"])]))
"""

import hashlib
import sys
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
import yaml

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildpack_packager.core.config import clear_settings_cache
from tests._support import Artifact


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Tests without an explicit unit/integration marker are unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point the default cache into tmp_path and reset cached settings."""
    monkeypatch.setenv("BUILDPACK_PACKAGER_CACHE_DIR", str(tmp_path / "default-cache"))
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


# =============================================================================
# Dependency Artifacts
# =============================================================================


@pytest.fixture
def make_artifact(tmp_path: Path) -> Callable[[str, bytes], Artifact]:
    """Factory writing artifact bytes under tmp_path/artifacts."""
    root = tmp_path / "artifacts"

    def _make(name: str, content: bytes) -> Artifact:
        root.mkdir(exist_ok=True)
        path = root / name
        path.write_bytes(content)
        return Artifact(
            path=path,
            uri=path.as_uri(),
            sha256=hashlib.sha256(content).hexdigest(),
            content=content,
        )

    return _make


# =============================================================================
# Buildpack Source Trees
# =============================================================================


@pytest.fixture
def make_buildpack(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a buildpack source directory.

    Always writes ``bin/compile`` (executable) and ``manifest.yml``; extra
    files are given as ``{relative_path: content}``.
    """

    def _make(
        manifest: dict[str, Any],
        files: dict[str, str | bytes] | None = None,
        name: str = "buildpack",
    ) -> Path:
        root = tmp_path / name
        root.mkdir()
        compile_script = root / "bin" / "compile"
        compile_script.parent.mkdir()
        compile_script.write_text("#!/bin/sh\necho compiling\n")
        compile_script.chmod(0o755)

        for rel, content in (files or {}).items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)

        (root / "manifest.yml").write_text(yaml.safe_dump(manifest, sort_keys=False))
        return root

    return _make
