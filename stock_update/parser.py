"""Parser for uploaded bulk stock update files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ParseError
from .models import InventoryItem, ParsedRow, ParseResult, RowError
from .normalize import parse_quantity, split_line

logger = logging.getLogger(__name__)

ID_COLUMN = "ID"
NEW_STOCK_COLUMN = "New Stock"
REQUIRED_COLUMNS = (ID_COLUMN, NEW_STOCK_COLUMN)


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    """Positions of the columns the parser reads from each data line."""

    id_index: int
    new_stock_index: int


def _find_column(headers: list[str], column: str) -> int | None:
    """Return the index of the first header containing `column`, ignoring case."""

    needle = column.lower()
    for index, header in enumerate(headers):
        if needle in header.lower():
            return index
    return None


def detect_columns(headers: list[str]) -> ColumnLayout:
    """Validate a header row and return where the required columns live.

    Every missing column is reported at once so a user fixes the file in one go.
    The identifier is always read from the first column, which is where
    generated templates put it; the header check only guarantees an ID column
    was declared.
    """

    positions = {column: _find_column(headers, column) for column in REQUIRED_COLUMNS}
    missing = [column for column, index in positions.items() if index is None]
    new_stock_index = positions[NEW_STOCK_COLUMN]
    if missing or new_stock_index is None:
        raise ParseError.missing(missing)

    return ColumnLayout(id_index=0, new_stock_index=new_stock_index)


def _field(values: list[str], index: int) -> str:
    return values[index] if index < len(values) else ""


def _to_row(
    *,
    line: str,
    row_number: int,
    layout: ColumnLayout,
    known_ids: set[str],
) -> ParsedRow | RowError | None:
    """Convert one data line into a row, a row error, or None when it is skipped."""

    values = split_line(line)
    item_id = _field(values, layout.id_index)
    raw_quantity = _field(values, layout.new_stock_index)

    if not item_id or not raw_quantity:
        return None

    requested = parse_quantity(raw_quantity)
    if requested is None:
        return RowError(
            source_row=row_number,
            code="invalid_quantity",
            message=f'Row {row_number}: invalid stock quantity "{raw_quantity}"',
        )

    if item_id not in known_ids:
        return RowError(
            source_row=row_number,
            code="unknown_item",
            message=f'Row {row_number}: item with ID "{item_id}" not found',
        )

    return ParsedRow(id=item_id, requested=requested, source_row=row_number)


def parse_upload(content: str, known_items: Iterable[InventoryItem]) -> ParseResult:
    """Parse uploaded text into validated rows and non-fatal row errors.

    Raises `ParseError` when the file has no data rows or lacks a required
    column. Row numbers count non-blank lines, starting with the header as 1.
    """

    lines = [line for line in content.split("\n") if line.strip()]
    if len(lines) < 2:
        raise ParseError.empty_file()

    layout = detect_columns(split_line(lines[0]))
    known_ids = {item.id for item in known_items}
    result = ParseResult()

    for row_number, line in enumerate(lines[1:], start=2):
        outcome = _to_row(line=line, row_number=row_number, layout=layout, known_ids=known_ids)
        if outcome is None:
            continue
        if isinstance(outcome, RowError):
            logger.debug(outcome.message)
            result.row_errors.append(outcome)
        else:
            result.rows.append(outcome)

    logger.info(f"Parsed upload: {len(result.rows)} valid rows, {len(result.row_errors)} row errors")
    return result
