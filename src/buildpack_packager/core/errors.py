"""
Structured error types for the buildpack packager.

Every failure the packaging pipeline can produce is raised as a subclass of
:class:`PackagerError`. Each error carries a category for routing and CLI
rendering, an :class:`ErrorContext` with the facts needed to diagnose the
failure without re-running (path, URI, expected vs. actual digest, exit
status), and an optional chained cause.

Manifesto:
    Packaging failures are never recovered locally. A checksum mismatch,
    a failed download, a malformed manifest or a failing pre-package hook
    all abort the run, so the error itself must say what went wrong and
    where. Plain ``OSError`` from the filesystem is propagated unchanged.

Architecture:
    ::

        PackagerError (category, context, cause)
        ├── NetworkError
        │   └── DownloadError
        ├── IntegrityError
        │   └── ChecksumMismatchError
        ├── ValidationError
        │   ├── SchemaError
        │   │   ├── ManifestCastError
        │   │   └── ManifestSchemaError
        │   ├── StackNotFoundError
        │   └── MissingDefaultDependencyError
        ├── ProcessError
        │   ├── PrePackageError
        │   └── LegacyPackagerError
        └── ConfigError

Examples:
    >>> err = ChecksumMismatchError("/cache/x.tgz", expected="ab", actual="cd")
    >>> err.category
    <ErrorCategory.INTEGRITY: 'INTEGRITY'>
    >>> err.context.expected_sha256
    'ab'

Tags:
    error-handling, exception-hierarchy, error-context, packaging

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and CLI rendering."""

    NETWORK = "NETWORK"  # Connection failure, non-2xx status
    STORAGE = "STORAGE"  # Disk, permissions
    INTEGRITY = "INTEGRITY"  # Checksum mismatch
    VALIDATION = "VALIDATION"  # Manifest shape, stack validation
    PROCESS = "PROCESS"  # External command exit status
    CONFIG = "CONFIG"  # Settings
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a :class:`PackagerError`.

    Only the fields that are set end up in :meth:`to_dict`, so a context can
    be shared by every error type without padding logs with ``None``.

    Attributes:
        path: Local filesystem path involved in the failure
        uri: Dependency URI being fetched
        stack: Target stack of the run
        field: Manifest field that had an unexpected shape
        expected_sha256: Checksum declared in the manifest
        actual_sha256: Checksum computed from the file on disk
        http_status: HTTP status code of a failed download
        exit_code: Exit status of an external command
        command: External command that was executed
        metadata: Additional key-value pairs
    """

    path: str | None = None
    uri: str | None = None
    stack: str | None = None
    field: str | None = None

    expected_sha256: str | None = None
    actual_sha256: str | None = None

    http_status: int | None = None

    exit_code: int | None = None
    command: str | None = None

    metadata: dict[str, Any] = dc_field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "uri", "stack", "field", "expected_sha256", "actual_sha256",
                    "http_status", "exit_code", "command"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class PackagerError(Exception):
    """
    Base exception for all packager errors.

    Subclasses set ``default_category`` so call sites only pass what is
    specific to the failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PackagerError:
        """
        Add context to this error (fluent API).

        Usage:
            raise PackagerError("Failed").with_context(path="/tmp/x", stack="cflinuxfs3")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# NETWORK ERRORS
# =============================================================================


class NetworkError(PackagerError):
    """Connection or transport failure."""

    default_category = ErrorCategory.NETWORK


class DownloadError(NetworkError):
    """A dependency could not be downloaded (transport error or non-2xx status)."""

    def __init__(
        self,
        uri: str,
        *,
        http_status: int | None = None,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        if message is None:
            if http_status is not None:
                message = f"could not download: {http_status}"
            else:
                message = f"could not download {uri}: {cause}"
        super().__init__(
            message,
            context=ErrorContext(uri=uri, http_status=http_status),
            cause=cause,
        )
        self.uri = uri
        self.http_status = http_status


# =============================================================================
# INTEGRITY ERRORS
# =============================================================================


class IntegrityError(PackagerError):
    """Content does not match its declared digest."""

    default_category = ErrorCategory.INTEGRITY


class ChecksumMismatchError(IntegrityError):
    """The SHA-256 of a dependency file differs from the manifest."""

    def __init__(self, path: str, *, expected: str, actual: str, uri: str | None = None):
        super().__init__(
            f"dependency sha256 mismatch: expected sha256 {expected}, actual sha256 {actual}",
            context=ErrorContext(path=path, uri=uri, expected_sha256=expected, actual_sha256=actual),
        )
        self.path = path
        self.expected = expected
        self.actual = actual


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(PackagerError):
    """
    Manifest or stack validation error.

    Never recoverable - the manifest must be fixed.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.context.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class SchemaError(ValidationError):
    """Manifest document does not match the expected schema."""

    pass


class ManifestCastError(SchemaError):
    """A raw manifest field has an unexpected shape."""

    def __init__(self, field: str, expected: str, value: Any = None):
        super().__init__(
            f"Could not cast {field} to {expected} (got {type(value).__name__})",
            field=field,
            value=value,
        )
        self.expected = expected


class ManifestSchemaError(SchemaError):
    """The typed manifest view rejected a field."""

    pass


class StackNotFoundError(ValidationError):
    """No dependency in the manifest declares the requested stack."""

    def __init__(self, stack: str):
        super().__init__(
            f"Stack `{stack}` not found in manifest",
            context=ErrorContext(stack=stack),
        )
        self.stack = stack


class MissingDefaultDependencyError(ValidationError):
    """A ``default_versions`` entry has no concrete match for the stack."""

    def __init__(self, name: str, stack: str, *, reason: str | None = None):
        super().__init__(
            f"No matching default dependency `{name}` for stack `{stack}`",
            context=ErrorContext(stack=stack, metadata={"dependency": name}),
        )
        self.name = name
        self.stack = stack
        if reason:
            self.context.metadata["reason"] = reason


# =============================================================================
# PROCESS ERRORS
# =============================================================================


class ProcessError(PackagerError):
    """An external command exited with a non-zero status."""

    default_category = ErrorCategory.PROCESS

    def __init__(self, message: str, *, command: str, exit_code: int, output: str = ""):
        super().__init__(message, context=ErrorContext(command=command, exit_code=exit_code))
        self.command = command
        self.exit_code = exit_code
        self.output = output

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.output:
            result["output"] = self.output
        return result


class PrePackageError(ProcessError):
    """The manifest's ``pre_package`` hook failed."""

    def __init__(self, command: str, exit_code: int, output: str = ""):
        super().__init__(
            f"pre_package command `{command}` exited with status {exit_code}",
            command=command,
            exit_code=exit_code,
            output=output,
        )


class LegacyPackagerError(ProcessError):
    """``bundle exec buildpack-packager`` failed for an extension buildpack."""

    def __init__(self, command: str, exit_code: int, output: str = ""):
        super().__init__(
            f"legacy packager `{command}` exited with status {exit_code}",
            command=command,
            exit_code=exit_code,
            output=output,
        )


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(PackagerError):
    """Invalid packager settings."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, PackagerError):
        return error.category
    if isinstance(error, OSError):
        return ErrorCategory.STORAGE
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "PackagerError",
    "NetworkError",
    "DownloadError",
    "IntegrityError",
    "ChecksumMismatchError",
    "ValidationError",
    "SchemaError",
    "ManifestCastError",
    "ManifestSchemaError",
    "StackNotFoundError",
    "MissingDefaultDependencyError",
    "ProcessError",
    "PrePackageError",
    "LegacyPackagerError",
    "ConfigError",
    "categorize_error",
]
