"""
CLI utility helpers - output formatting and error rendering.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from buildpack_packager.core.errors import PackagerError, ProcessError, categorize_error

err_console = Console(stderr=True)


def output_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, default=str))


def fail(error: PackagerError | OSError) -> NoReturn:
    """Render a packaging or filesystem error on stderr and exit with status 1."""
    category = categorize_error(error)
    if isinstance(error, PackagerError):
        message = error.message
        context = error.context.to_dict()
    else:
        message = error.strerror or str(error)
        context = {"path": error.filename} if error.filename else {}

    err_console.print(f"[bold red]Error[/bold red] ({category.value}): {escape(message)}")
    for key, value in context.items():
        err_console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
    if isinstance(error, ProcessError) and error.output:
        err_console.print(error.output, markup=False, highlight=False)
    raise typer.Exit(code=1)
