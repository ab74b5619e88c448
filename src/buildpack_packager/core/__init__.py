"""Core primitives shared by the manifest and packaging layers.

Architecture::

    errors.py          Structured error hierarchy (PackagerError, ...)
    logging.py         structlog configuration + get_logger
    hashing.py         SHA-256 file digests, URI cache keys
    config/            PackagerSettings (pydantic-settings) + get_settings
"""

from buildpack_packager.core.errors import (
    ChecksumMismatchError,
    ConfigError,
    DownloadError,
    ErrorCategory,
    ErrorContext,
    IntegrityError,
    LegacyPackagerError,
    ManifestCastError,
    ManifestSchemaError,
    MissingDefaultDependencyError,
    NetworkError,
    PackagerError,
    PrePackageError,
    ProcessError,
    SchemaError,
    StackNotFoundError,
    ValidationError,
    categorize_error,
)
from buildpack_packager.core.hashing import digests_equal, sha256_file, uri_digest

__all__ = [
    "ChecksumMismatchError",
    "ConfigError",
    "DownloadError",
    "ErrorCategory",
    "ErrorContext",
    "IntegrityError",
    "LegacyPackagerError",
    "ManifestCastError",
    "ManifestSchemaError",
    "MissingDefaultDependencyError",
    "NetworkError",
    "PackagerError",
    "PrePackageError",
    "ProcessError",
    "SchemaError",
    "StackNotFoundError",
    "ValidationError",
    "categorize_error",
    "digests_equal",
    "sha256_file",
    "uri_digest",
]
