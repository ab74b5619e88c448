"""Stack validation against a manifest's typed view.

Before packaging for a stack, two things must hold:

1. at least one dependency declares the stack in ``cf_stacks``,
2. every ``default_versions`` entry resolves to a concrete dependency built
   for that stack.

The stack is always passed explicitly; nothing here reads or writes process
environment, so concurrent validations for different stacks cannot see each
other's target.

Version constraints in ``default_versions`` are dotted patterns where a
segment of ``x``, ``X`` or ``*`` matches anything and missing trailing
segments match anything (``2.7`` and ``2.7.x`` both match ``2.7.1``).
"""

from __future__ import annotations

from buildpack_packager.core.errors import MissingDefaultDependencyError, StackNotFoundError
from buildpack_packager.core.logging import get_logger
from buildpack_packager.manifest.models import Dependency, ManifestView

logger = get_logger(__name__)

_WILDCARDS = frozenset({"x", "X", "*"})


def has_stack(view: ManifestView, stack: str) -> bool:
    """True when any dependency lists ``stack`` in ``cf_stacks``."""
    return any(stack in dep.stacks for dep in view.dependencies)


def version_matches(version: str, constraint: str) -> bool:
    """Check a concrete version against a wildcard constraint."""
    version_parts = version.split(".")
    constraint_parts = constraint.split(".")
    if len(constraint_parts) > len(version_parts):
        return False
    for have, want in zip(version_parts, constraint_parts):
        if want in _WILDCARDS:
            continue
        if have != want:
            return False
    return True


def _version_key(version: str) -> tuple[tuple[int, int | str], ...]:
    # numeric segments sort before and numerically, others lexically
    return tuple((0, int(part)) if part.isdigit() else (1, part) for part in version.split("."))


def default_version(view: ManifestView, name: str, stack: str) -> Dependency:
    """Resolve the default version of ``name`` for ``stack``.

    Returns the highest matching dependency.

    Raises
    ------
    MissingDefaultDependencyError
        If ``name`` has zero or several ``default_versions`` entries, or no
        dependency matches the constraint for the stack.
    """
    defaults = [d for d in view.default_versions if d.name == name]
    if len(defaults) != 1:
        raise MissingDefaultDependencyError(
            name, stack, reason=f"found {len(defaults)} default_versions entries"
        )

    constraint = defaults[0].version
    candidates = [
        dep
        for dep in view.dependencies
        if dep.name == name and stack in dep.stacks and version_matches(dep.version, constraint)
    ]
    if not candidates:
        raise MissingDefaultDependencyError(
            name, stack, reason=f"no dependency matches version {constraint}"
        )
    return max(candidates, key=lambda dep: _version_key(dep.version))


def validate_stack(view: ManifestView, stack: str) -> None:
    """Validate that the manifest can be packaged for ``stack``.

    An empty stack means "package for every stack" and is always valid.

    Raises
    ------
    StackNotFoundError
        If no dependency declares the stack.
    MissingDefaultDependencyError
        If a default version has no concrete match for the stack.
    """
    if not stack:
        return

    if not has_stack(view, stack):
        raise StackNotFoundError(stack)

    for default in view.default_versions:
        resolved = default_version(view, default.name, stack)
        logger.debug(
            "stack.default_resolved",
            stack=stack,
            dependency=default.name,
            version=resolved.version,
        )
