"""Archive builder: write a zip from an explicit, ordered list of files.

Entries are written in exactly the order given, with exactly the names
given. The builder does not sort, deduplicate, or walk directories; the
caller decides what goes in.

The archive is assembled in a temporary file beside the destination and
moved over it with ``os.replace`` only after the zip is complete, so a
failed build never leaves a truncated archive under the final name.
"""

from __future__ import annotations

import os
import tempfile
import zipfile
from collections.abc import Iterable
from pathlib import Path

from buildpack_packager.core.logging import get_logger
from buildpack_packager.packaging.models import File

logger = get_logger(__name__)

ARCHIVE_MODE = 0o644


def build_archive(archive_path: str | Path, files: Iterable[File]) -> Path:
    """Create (or replace) a deflate-compressed zip at ``archive_path``.

    Each entry keeps the source file's modification time and permission
    bits.

    Raises
    ------
    OSError
        The destination or a source file could not be opened, or a write
        failed. The destination is left as it was.
    """
    destination = Path(archive_path)
    fd, tmp_name = tempfile.mkstemp(dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp")
    os.close(fd)

    count = 0
    try:
        with zipfile.ZipFile(tmp_name, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False) as zf:
            for file in files:
                zf.write(file.path, arcname=file.name)
                count += 1
        os.chmod(tmp_name, ARCHIVE_MODE)
        os.replace(tmp_name, destination)
    finally:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.info(
        "archive.written",
        archive=str(destination),
        entries=count,
        size_bytes=destination.stat().st_size,
    )
    return destination
