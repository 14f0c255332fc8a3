"""Exceptions raised by the bulk stock update pipeline."""

from __future__ import annotations

from enum import Enum


class StockUpdateError(Exception):
    """Base class for every error raised by this package."""


class ParseErrorKind(str, Enum):
    EMPTY_FILE = "EmptyFile"
    MISSING_COLUMNS = "MissingColumns"


class ParseError(StockUpdateError, ValueError):
    """The upload cannot be processed at all; the user has to fix and re-upload it."""

    def __init__(self, kind: ParseErrorKind, message: str, missing_columns: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.missing_columns = missing_columns

    @classmethod
    def empty_file(cls) -> ParseError:
        return cls(ParseErrorKind.EMPTY_FILE, "File must contain a header row and at least one data row")

    @classmethod
    def missing(cls, columns: list[str]) -> ParseError:
        return cls(
            ParseErrorKind.MISSING_COLUMNS,
            f"Missing required columns: {', '.join(columns)}",
            missing_columns=tuple(columns),
        )


class UnsupportedFileError(StockUpdateError, ValueError):
    """Uploaded file is neither CSV nor XLSX."""


class CommitError(StockUpdateError):
    """The commit gate was used out of order (empty batch or repeated submission)."""
