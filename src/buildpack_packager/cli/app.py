"""
Root Typer application for the ``buildpack-packager`` CLI.
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from buildpack_packager.cli.utils import fail, output_json
from buildpack_packager.core.config import LogFormat, get_settings
from buildpack_packager.core.errors import PackagerError
from buildpack_packager.core.logging import configure_logging

app = Typer(
    name="buildpack-packager",
    help="Build versioned, stack-specific buildpack archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from buildpack_packager import __version__

        typer.echo(f"buildpack-packager {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version_info: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version-info",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override BUILDPACK_PACKAGER_LOG_LEVEL."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON on stderr."),
) -> None:
    """buildpack-packager CLI - package buildpacks for release."""
    try:
        settings = get_settings()
    except PackagerError as e:
        fail(e)
    configure_logging(
        level=log_level or settings.log_level,
        json_format=json_logs or settings.log_format == LogFormat.JSON,
    )


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("package")
def package_cmd(
    version: str = typer.Option(..., "--version", "-v", help="Version written to VERSION and the archive name"),
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Buildpack source directory"),
    stack: str = typer.Option("", "--stack", "-s", help="Target stack (empty: every stack)"),
    cached: bool = typer.Option(False, "--cached/--uncached", help="Bundle dependencies in the archive"),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help="Dependency cache root"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Package a buildpack for a stack."""
    from buildpack_packager.packaging import BuildpackPackager

    try:
        path = BuildpackPackager(cache_dir=cache_dir).package(directory, version, stack=stack, cached=cached)
    except (PackagerError, OSError) as e:
        fail(e)

    if json_out:
        output_json({"archive": str(path), "version": version, "stack": stack, "cached": cached})
    else:
        kind = "Cached" if cached else "Uncached"
        typer.echo(f"{kind} buildpack created and saved as {path}")


@app.command("extension")
def extension_cmd(
    version: str = typer.Option(..., "--version", "-v"),
    directory: Path = typer.Option(Path("."), "--dir", "-d"),
    cached: bool = typer.Option(False, "--cached/--uncached"),
) -> None:
    """Package an extension buildpack with the legacy Ruby packager."""
    from buildpack_packager.packaging import BuildpackPackager

    try:
        path = BuildpackPackager().compile_extension(directory, version, cached=cached)
    except (PackagerError, OSError) as e:
        fail(e)

    typer.echo(f"Extension buildpack created and saved as {path}")
