"""Behavior tests for parsing uploaded bulk stock files.

These cover header validation, which rows are skipped silently, and which rows
are rejected with a row-level error while the rest of the file still parses.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from stock_update.errors import ParseError, ParseErrorKind
from stock_update.models import InventoryItem
from stock_update.parser import detect_columns, parse_upload

HEADER = "ID,Name,Current Stock,Unit,Min Level,Max Level,New Stock\n"


def test_parse_upload_accepts_valid_rows(raw_materials: list[InventoryItem]) -> None:
    content = HEADER + 'RM001,"Steel Sheet",150,kg,50,300,160\nRM003,"Paint",12.5,l,5,0,10.25\n'
    result = parse_upload(content, raw_materials)

    assert [(row.id, row.requested, row.source_row) for row in result.rows] == [
        ("RM001", Decimal("160"), 2),
        ("RM003", Decimal("10.25"), 3),
    ]
    assert result.row_errors == []


@pytest.mark.parametrize("content", ["", "\n\n  \n", HEADER, "\n" + HEADER + "\n   \n"])
def test_parse_upload_requires_header_and_data(content: str, raw_materials: list[InventoryItem]) -> None:
    """Anything short of a header plus one non-blank line is an empty file."""
    with pytest.raises(ParseError) as excinfo:
        parse_upload(content, raw_materials)
    assert excinfo.value.kind is ParseErrorKind.EMPTY_FILE


def test_missing_new_stock_column_is_named_exactly(raw_materials: list[InventoryItem]) -> None:
    """Dropping `New Stock` fails with MissingColumns naming only that column."""
    content = "ID,Name,Current Stock\nRM001,Steel Sheet,150\n"
    with pytest.raises(ParseError) as excinfo:
        parse_upload(content, raw_materials)

    assert excinfo.value.kind is ParseErrorKind.MISSING_COLUMNS
    assert excinfo.value.missing_columns == ("New Stock",)
    assert str(excinfo.value) == "Missing required columns: New Stock"


def test_all_missing_columns_are_reported_together() -> None:
    with pytest.raises(ParseError) as excinfo:
        detect_columns(["Name", "Quantity"])
    assert excinfo.value.missing_columns == ("ID", "New Stock")


def test_header_matching_is_case_insensitive_substring() -> None:
    """Quoted, re-cased or prefixed headers still satisfy the required columns."""
    layout = detect_columns(["item id", "Name", "Requested NEW STOCK"])
    assert layout.id_index == 0
    assert layout.new_stock_index == 2


def test_rows_with_empty_id_or_quantity_are_skipped_silently(raw_materials: list[InventoryItem]) -> None:
    content = HEADER + ',"Steel Sheet",150,kg,50,300,160\nRM001,"Steel Sheet",150,kg,50,300,\nRM001,"x"\n'
    result = parse_upload(content, raw_materials)

    assert result.rows == []
    assert result.row_errors == []


def test_negative_quantity_is_a_row_error(raw_materials: list[InventoryItem]) -> None:
    """`RM001,-5` is dropped with an invalid stock quantity error."""
    result = parse_upload("ID,New Stock\nRM001,-5\n", raw_materials)

    assert result.rows == []
    assert result.error_messages == ['Row 2: invalid stock quantity "-5"']
    assert result.row_errors[0].code == "invalid_quantity"


def test_unknown_item_is_a_row_error(raw_materials: list[InventoryItem]) -> None:
    """`RM999,10` is dropped and the error names the unknown identifier."""
    result = parse_upload("ID,New Stock\nRM999,10\n", raw_materials)

    assert result.rows == []
    assert len(result.row_errors) == 1
    assert "RM999" in result.error_messages[0]
    assert result.error_messages[0] == 'Row 2: item with ID "RM999" not found'


def test_row_errors_do_not_abort_the_batch(raw_materials: list[InventoryItem]) -> None:
    """Bad lines are reported while the good lines around them are kept."""
    content = "ID,New Stock\nRM001,abc\nRM002,30\nRM999,1\nRM003,8\n"
    result = parse_upload(content, raw_materials)

    assert [row.id for row in result.rows] == ["RM002", "RM003"]
    assert result.error_messages == [
        'Row 2: invalid stock quantity "abc"',
        'Row 4: item with ID "RM999" not found',
    ]


def test_row_numbers_ignore_blank_lines(raw_materials: list[InventoryItem]) -> None:
    result = parse_upload("ID,New Stock\n\nRM001,oops\r\n", raw_materials)
    assert result.row_errors[0].source_row == 2


def test_identifier_is_read_from_first_column(raw_materials: list[InventoryItem]) -> None:
    content = 'ID,Name,SKU,Current Stock,Unit,Min Level,Max Level,New Stock\nRM001,"Steel Sheet","SK-1",150,kg,50,300,175\n'
    result = parse_upload(content, raw_materials)
    assert result.rows[0].id == "RM001"
    assert result.rows[0].requested == Decimal("175")


def test_duplicate_identifiers_are_kept_as_separate_rows(raw_materials: list[InventoryItem]) -> None:
    result = parse_upload("ID,New Stock\nRM001,100\nRM001,120\n", raw_materials)
    assert [row.requested for row in result.rows] == [Decimal("100"), Decimal("120")]
