"""buildpack-packager CLI.

Entry point: ``buildpack-packager`` (see :mod:`buildpack_packager.cli.app`).
"""

from buildpack_packager.cli.app import app

__all__ = ["app"]
