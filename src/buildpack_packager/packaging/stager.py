"""
Directory stager: isolated working copies of a buildpack source tree.

The packager never mutates the source directory. It copies it into a fresh
temporary directory, rewrites the manifest there, and zips from there.

Copy rules:
    - entries named ``.git`` or ``tests`` are skipped at any depth,
      together with their whole subtree
    - symlinks are recreated with the same target, never dereferenced
    - regular files keep their bytes, permission bits and mtime
    - directories get the source's permission bits once their children
      are in place, so read-only directories can still be filled

Usage::

    with StagingDirectory("/src/ruby-buildpack") as staged:
        (staged / "VERSION").write_text("1.2.3")
        ...
    # staged directory is gone here, even if the body raised

Tags:
    packaging, staging, filesystem, tempdir
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

from buildpack_packager.core.logging import get_logger

logger = get_logger(__name__)

EXCLUDED_NAMES = frozenset({".git", "tests"})
STAGING_PREFIX = "buildpack-packager"


def copy_directory(src_dir: str | Path) -> Path:
    """Copy ``src_dir`` into a new temporary directory and return its path.

    Any ``OSError`` aborts the copy; the partial staging directory is
    removed before the error propagates.
    """
    src = Path(src_dir)
    dest = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
    try:
        _copy_tree(src, dest)
        shutil.copymode(src, dest)
    except BaseException:
        remove_tree(dest)
        raise
    return dest


def _copy_tree(src: Path, dest: Path) -> None:
    with os.scandir(src) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        if entry.name in EXCLUDED_NAMES:
            continue
        target = dest / entry.name
        if entry.is_symlink():
            os.symlink(os.readlink(entry.path), target)
        elif entry.is_dir(follow_symlinks=False):
            target.mkdir()
            _copy_tree(Path(entry.path), target)
            shutil.copymode(entry.path, target)
        else:
            shutil.copy2(entry.path, target, follow_symlinks=False)


class StagingDirectory:
    """Context manager owning one staged copy of a source tree."""

    def __init__(self, src_dir: str | Path) -> None:
        self.src_dir = Path(src_dir)
        self.path: Path | None = None

    def __enter__(self) -> Path:
        self.path = copy_directory(self.src_dir)
        logger.debug("buildpack.staged", source=str(self.src_dir), staged_dir=str(self.path))
        return self.path

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.path is not None:
            remove_tree(self.path)
            self.path = None


def remove_tree(root: Path) -> None:
    """Delete a staged tree, including read-only directories copied from the source."""
    if not root.exists():
        return
    os.chmod(root, 0o755)
    for dirpath, dirnames, _ in os.walk(root):
        for name in dirnames:
            path = os.path.join(dirpath, name)
            if not os.path.islink(path):
                os.chmod(path, 0o755)
    shutil.rmtree(root, ignore_errors=True)
