"""Buildpack manifest: typed view, raw document, and stack validation."""

from buildpack_packager.manifest.document import MANIFEST_FILENAME, ManifestDocument, load_manifest
from buildpack_packager.manifest.models import DefaultVersion, Dependency, ManifestView
from buildpack_packager.manifest.validation import (
    default_version,
    has_stack,
    validate_stack,
    version_matches,
)

__all__ = [
    "MANIFEST_FILENAME",
    "DefaultVersion",
    "Dependency",
    "ManifestDocument",
    "ManifestView",
    "default_version",
    "has_stack",
    "load_manifest",
    "validate_stack",
    "version_matches",
]
