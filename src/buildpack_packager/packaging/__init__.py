"""
Buildpack packaging: staged, verified, deterministic release archives.

Architecture::

    ┌────────────────────┐
    │  BuildpackPackager │
    │                    │
    │  .package()  ──────┼──► <language>_buildpack[-cached]-v<version>.zip
    │  .compile_extension() ─► legacy gem archive
    └────────────────────┘
          │ uses
          ├── StagingDirectory     isolated copy of the source tree
          ├── ManifestTransformer  stack filter + manifest rewrite
          ├── DependencyFetcher    verified, content-addressed cache
          └── build_archive        ordered, deflated zip

Usage::

    from buildpack_packager.packaging import BuildpackPackager

    path = BuildpackPackager().package("ruby-buildpack", "1.2.3", stack="cflinuxfs3", cached=True)

Tags:
    packaging, zip, archive, buildpack, cache
"""

from buildpack_packager.packaging.archive import build_archive
from buildpack_packager.packaging.fetcher import DependencyFetcher, cache_name
from buildpack_packager.packaging.models import File
from buildpack_packager.packaging.packager import (
    BuildpackPackager,
    archive_name,
    compile_extension_package,
    package,
)
from buildpack_packager.packaging.stager import StagingDirectory, copy_directory
from buildpack_packager.packaging.transformer import ManifestTransformer

__all__ = [
    "BuildpackPackager",
    "DependencyFetcher",
    "File",
    "ManifestTransformer",
    "StagingDirectory",
    "archive_name",
    "build_archive",
    "cache_name",
    "compile_extension_package",
    "copy_directory",
    "package",
]
