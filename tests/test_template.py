"""Tests for template generation and its round trip through the parser."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from stock_update.exporter import DirectoryExporter
from stock_update.models import InventoryItem
from stock_update.parser import parse_upload
from stock_update.reconcile import reconcile_rows
from stock_update.template import build_template, export_template, template_filename


def test_raw_material_template_layout(raw_materials: list[InventoryItem]) -> None:
    lines = build_template(raw_materials, "raw-materials").split("\n")

    assert lines == [
        "ID,Name,Current Stock,Unit,Min Level,Max Level,New Stock",
        'RM001,"Steel Sheet",150,kg,50,300,150',
        'RM002,"Copper Wire",0,m,0,0,0',
        'RM003,"Paint",12.5,l,5,0,12.5',
    ]


def test_finished_goods_template_adds_sku_column() -> None:
    items = [
        InventoryItem(id="FG001", name="Chair", current=Decimal("20"), unit="pcs", sku="CH-01"),
        InventoryItem(id="FG002", name="Stool", current=Decimal("3")),
    ]
    lines = build_template(items, "finished-goods").split("\n")

    assert lines[0] == "ID,Name,SKU,Current Stock,Unit,Min Level,Max Level,New Stock"
    assert lines[1] == 'FG001,"Chair","CH-01",20,pcs,0,0,20'
    assert lines[2] == 'FG002,"Stool","",3,units,0,0,3'


def test_template_rejects_unknown_category() -> None:
    with pytest.raises(ValueError, match="Unsupported item category"):
        build_template([], "spare-parts")  # type: ignore[arg-type]


@pytest.mark.parametrize("category", ["raw-materials", "finished-goods"])
def test_unmodified_template_round_trips_without_changes(
    category: str,
    raw_materials: list[InventoryItem],
) -> None:
    """Re-uploading an untouched template proposes zero deltas and no warnings."""
    result = parse_upload(build_template(raw_materials, category), raw_materials)  # type: ignore[arg-type]
    updates = reconcile_rows(result.rows, raw_materials)

    assert result.row_errors == []
    assert len(updates) == len(raw_materials)
    assert all(update.delta == 0 for update in updates)
    assert not any(update.has_warning for update in updates)


def test_export_template_saves_through_exporter(tmp_path: Path, raw_materials: list[InventoryItem]) -> None:
    path = export_template(raw_materials, "raw-materials", DirectoryExporter(tmp_path / "exports"))

    assert path == tmp_path / "exports" / "raw-materials-bulk-update-template.csv"
    assert path.read_text(encoding="utf-8") == build_template(raw_materials, "raw-materials")


def test_export_template_uses_injected_port(raw_materials: list[InventoryItem]) -> None:
    """Any object with `save(filename, content)` can receive the template."""

    class RecordingExporter:
        def __init__(self) -> None:
            self.saved: list[tuple[str, str]] = []

        def save(self, filename: str, content: str) -> str:
            self.saved.append((filename, content))
            return filename

    exporter = RecordingExporter()
    assert export_template(raw_materials, "finished-goods", exporter) == template_filename("finished-goods")
    assert exporter.saved[0][1].startswith("ID,Name,SKU,")


@pytest.mark.parametrize("category", ["raw-materials", "finished-goods"])
def test_commas_in_free_text_do_not_shift_columns(category: str) -> None:
    """A comma in a name, SKU or unit must not move `New Stock` on re-upload."""
    items = [
        InventoryItem(
            id="RM001",
            name="Bolt, M8",
            current=Decimal("150"),
            unit="box, 100",
            minimum=Decimal("50"),
            maximum=Decimal("300"),
            sku="B,M8",
        )
    ]
    text = build_template(items, category)  # type: ignore[arg-type]
    result = parse_upload(text, items)
    updates = reconcile_rows(result.rows, items)

    assert text.split("\n")[1].startswith('RM001,"Bolt; M8"')
    assert [update.delta for update in updates] == [0]
    assert not updates[0].has_warning


def test_huge_quantities_round_trip() -> None:
    items = [InventoryItem(id="RM001", name="Grain", current=Decimal("1E+30"))]
    text = build_template(items, "raw-materials")
    result = parse_upload(text, items)

    assert text.split("\n")[1] == 'RM001,"Grain",' + "1" + "0" * 30 + ",units,0,0,1" + "0" * 30
    assert [row.requested for row in result.rows] == [Decimal("1E+30")]
