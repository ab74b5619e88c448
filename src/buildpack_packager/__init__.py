"""
buildpack-packager - build versioned, stack-specific buildpack archives.

Quick start::

    from buildpack_packager import BuildpackPackager

    path = BuildpackPackager(cache_dir="/tmp/cache").package(
        "ruby-buildpack", "1.2.3", stack="cflinuxfs3", cached=True
    )
"""

__version__ = "0.1.0"

from buildpack_packager.core.errors import PackagerError
from buildpack_packager.packaging import (
    BuildpackPackager,
    File,
    compile_extension_package,
    package,
)

__all__ = [
    "BuildpackPackager",
    "File",
    "PackagerError",
    "__version__",
    "compile_extension_package",
    "package",
]
