"""Public API exports for the bulk stock update pipeline."""

from .commit import CommitGate
from .errors import CommitError, ParseError, ParseErrorKind, StockUpdateError, UnsupportedFileError
from .models import CommitResult, InventoryItem, ParsedRow, ParseResult, ReconciledUpdate, RowError
from .parser import parse_upload
from .reconcile import classify, reconcile_rows
from .template import build_template, export_template

__all__ = [
    "CommitError",
    "CommitGate",
    "CommitResult",
    "InventoryItem",
    "ParseError",
    "ParseErrorKind",
    "ParseResult",
    "ParsedRow",
    "ReconciledUpdate",
    "RowError",
    "StockUpdateError",
    "UnsupportedFileError",
    "build_template",
    "classify",
    "export_template",
    "parse_upload",
    "reconcile_rows",
]
