"""CSV template generation for offline bulk stock edits."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar

from .exporter import FileExporter
from .models import InventoryItem, ItemCategory
from .normalize import field_text, format_quantity

logger = logging.getLogger(__name__)

T = TypeVar("T")

RAW_MATERIAL_HEADERS = ("ID", "Name", "Current Stock", "Unit", "Min Level", "Max Level", "New Stock")
FINISHED_GOOD_HEADERS = ("ID", "Name", "SKU", "Current Stock", "Unit", "Min Level", "Max Level", "New Stock")


def template_headers(category: ItemCategory) -> tuple[str, ...]:
    if category == "finished-goods":
        return FINISHED_GOOD_HEADERS
    if category == "raw-materials":
        return RAW_MATERIAL_HEADERS
    raise ValueError(f"Unsupported item category: {category}")


def template_filename(category: ItemCategory) -> str:
    return f"{category}-bulk-update-template.csv"


def _template_row(item: InventoryItem, category: ItemCategory) -> str:
    current = format_quantity(item.current)
    values = [item.id, f'"{field_text(item.name)}"']
    if category == "finished-goods":
        values.append(f'"{field_text(item.sku)}"')
    values.extend(
        [
            current,
            field_text(item.unit),
            format_quantity(item.minimum),
            format_quantity(item.maximum),
            current,
        ]
    )
    return ",".join(values)


def build_template(items: Iterable[InventoryItem], category: ItemCategory) -> str:
    """Return template CSV text with `New Stock` pre-filled from current stock."""

    lines = [",".join(template_headers(category))]
    lines.extend(_template_row(item, category) for item in items)
    return "\n".join(lines)


def export_template(
    items: Iterable[InventoryItem],
    category: ItemCategory,
    exporter: FileExporter[T],
) -> T:
    """Generate the template and hand it to the file-export port."""

    content = build_template(items, category)
    filename = template_filename(category)
    logger.info(f"Exporting {category} template as {filename}")
    return exporter.save(filename, content)
