"""Pydantic models for the typed view of a buildpack ``manifest.yml``.

The typed view is read-only and used for iteration (which dependencies
exist, which stacks they target, what the pre-package hook is). Rewriting
goes through :class:`~buildpack_packager.manifest.document.ManifestDocument`
so fields this view does not know about survive untouched.

Example YAML::

    language: ruby
    pre_package: scripts/build.sh
    included_files:
      - VERSION
      - manifest.yml
      - bin/compile
    default_versions:
      - name: ruby
        version: 2.7.x
    dependencies:
      - name: ruby
        version: 2.7.1
        uri: https://buildpacks.example.com/ruby-2.7.1.tgz
        sha256: 5f3c...
        cf_stacks:
          - cflinuxfs3

Tags:
    manifest, yaml, pydantic, typed-view

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from buildpack_packager.core.errors import ManifestSchemaError


def _as_str(v: Any) -> Any:
    # YAML reads bare versions like ``2.7`` as floats
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class Dependency(BaseModel):
    """One entry of the manifest's ``dependencies`` list."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(default="", description="Dependency name (used by default_versions)")
    version: str = Field(default="", description="Concrete dependency version")
    uri: str = Field(..., min_length=1, description="Download location (http(s) or file)")
    sha256: str = Field(..., min_length=1, description="Hex SHA-256 of the content at uri")
    stacks: tuple[str, ...] = Field(default=(), alias="cf_stacks", description="Stacks this build targets")

    @field_validator("name", "version", mode="before")
    @classmethod
    def _coerce_str(cls, v: Any) -> Any:
        return _as_str(v)

    def available_for(self, stack: str) -> bool:
        """True when the dependency belongs in an archive for ``stack``.

        An empty stack means "every stack".
        """
        return not stack or stack in self.stacks


class DefaultVersion(BaseModel):
    """One entry of ``default_versions``: a name and a version constraint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    version: str

    @field_validator("name", "version", mode="before")
    @classmethod
    def _coerce_str(cls, v: Any) -> Any:
        return _as_str(v)


class ManifestView(BaseModel):
    """Typed, read-only projection of a manifest document."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    language: str = Field(..., min_length=1)
    pre_package: str | None = Field(default=None, description="Executable run in the staged directory")
    include_files: tuple[str, ...] = Field(default=(), alias="included_files")
    dependencies: tuple[Dependency, ...] = Field(default=())
    default_versions: tuple[DefaultVersion, ...] = Field(default=())

    @field_validator("pre_package", mode="before")
    @classmethod
    def _blank_hook_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("include_files", "dependencies", "default_versions", mode="before")
    @classmethod
    def _null_list_is_empty(cls, v: Any) -> Any:
        return () if v is None else v

    @property
    def stacks(self) -> set[str]:
        """Every stack named by any dependency."""
        return {stack for dep in self.dependencies for stack in dep.stacks}

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ManifestView:
        """Validate a raw manifest mapping.

        Raises
        ------
        ManifestSchemaError
            Naming the first offending field path (e.g. ``dependencies.1.uri``).
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            loc = ".".join(str(part) for part in first["loc"]) or "manifest"
            raise ManifestSchemaError(
                f"Invalid manifest field `{loc}`: {first['msg']}",
                field=loc,
                value=first.get("input"),
                cause=exc,
            ) from exc
