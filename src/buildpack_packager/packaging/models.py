"""Data models shared by the packaging steps."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class File:
    """One entry destined for the archive.

    ``name`` is the archive-relative path (always ``/``-separated) and
    ``path`` is where the bytes live locally.
    """

    name: str
    path: Path

    def __str__(self) -> str:
        return f"{self.name} <- {self.path}"
