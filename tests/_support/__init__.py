"""
Test support utilities for buildpack-packager tests.

Helpers that don't fit as pytest fixtures but are shared across test
files, mostly manifest builders and archive inspection.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass
class Artifact:
    """A local file usable as a ``file://`` dependency."""

    path: Path
    uri: str
    sha256: str
    content: bytes


def dependency_entry(artifact: Artifact, stacks: list[str], **extra: Any) -> dict[str, Any]:
    """Manifest ``dependencies`` entry for an artifact.

    ``name`` and ``version`` default to the artifact's stem and ``1.0.0``;
    any other keyword lands in the entry unchanged.
    """
    entry: dict[str, Any] = {
        "name": extra.pop("name", artifact.path.stem),
        "version": extra.pop("version", "1.0.0"),
        "uri": artifact.uri,
        "sha256": artifact.sha256,
        "cf_stacks": stacks,
    }
    entry.update(extra)
    return entry


def ruby_manifest(dependencies: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    """A minimal ruby buildpack manifest."""
    manifest: dict[str, Any] = {
        "language": "ruby",
        "url_to_dependency_map": [{"match": "ruby-(\\d+\\.\\d+\\.\\d+)", "name": "ruby", "version": "$1"}],
        "included_files": ["VERSION", "manifest.yml", "bin/compile"],
        "dependencies": dependencies,
    }
    manifest.update(extra)
    return manifest


def read_archive_manifest(archive: Path) -> dict[str, Any]:
    """Parse ``manifest.yml`` from inside a built archive."""
    with zipfile.ZipFile(archive) as zf:
        return yaml.safe_load(zf.read("manifest.yml"))


def assert_dict_subset(actual: dict, expected: dict, path: str = "") -> None:
    """
    Assert that expected is a subset of actual (recursive).

    Useful for checking rewritten manifests where unrelated keys
    are carried through untouched.
    """
    for key, expected_value in expected.items():
        current_path = f"{path}.{key}" if path else key

        assert key in actual, f"Missing key at {current_path}"
        actual_value = actual[key]

        if isinstance(expected_value, dict) and isinstance(actual_value, dict):
            assert_dict_subset(actual_value, expected_value, current_path)
        else:
            assert actual_value == expected_value, (
                f"Mismatch at {current_path}: "
                f"expected {expected_value!r}, got {actual_value!r}"
            )
