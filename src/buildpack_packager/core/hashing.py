"""
Deterministic hashing utilities for dependency caching and verification.

Two hashes are involved in packaging:

- **Content digest:** SHA-256 of a dependency file, compared against the
  checksum declared in the manifest on every use of a cached file.
- **Cache key:** MD5 hex of a dependency URI, used only to derive a stable
  directory name under ``<cache>/dependencies/``. It is an identifier, not an
  integrity check, so the cache layout stays compatible with caches written
  by earlier packagers.

Examples:
    >>> uri_digest("https://example.com/ruby-2.7.1.tgz")
    'f0b5c1b5...'  # 32-char hex string

    >>> digests_equal("ABCDEF", "abcdef")
    True

Tags:
    hashing, sha256, cache-key, integrity
"""

import hashlib
import os

CHUNK_SIZE = 1024 * 1024


def sha256_file(path: str | os.PathLike[str], chunk_size: int = CHUNK_SIZE) -> str:
    """
    Compute the lowercase hex SHA-256 of a file's content.

    The file is streamed in chunks so large binaries are never loaded whole.

    Args:
        path: File to hash
        chunk_size: Read size in bytes

    Returns:
        64-char lowercase hex string
    """
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def uri_digest(uri: str) -> str:
    """Return the 32-char hex cache key for a dependency URI."""
    return hashlib.md5(uri.encode(), usedforsecurity=False).hexdigest()


def digests_equal(expected: str, actual: str) -> bool:
    """Compare two hex digests case-insensitively."""
    return expected.strip().lower() == actual.strip().lower()
