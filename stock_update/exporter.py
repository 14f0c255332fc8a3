"""File-export port used to hand generated documents to the host environment."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class FileExporter(Protocol[T_co]):
    """Anything that can save a named text document and report where it went."""

    def save(self, filename: str, content: str) -> T_co: ...


class DirectoryExporter:
    """Write exported documents into a local directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def save(self, filename: str, content: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        path.write_text(content, encoding="utf-8")
        return path
