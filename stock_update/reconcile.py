"""Reconciliation of parsed upload rows against the current inventory snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from .models import InventoryItem, ParsedRow, ReconciledUpdate, WarningReason
from .normalize import format_quantity

logger = logging.getLogger(__name__)

DEFAULT_LARGE_CHANGE_RATIO = Decimal("0.5")


def classify(
    item: InventoryItem,
    requested: Decimal,
    *,
    large_change_ratio: Decimal = DEFAULT_LARGE_CHANGE_RATIO,
) -> tuple[WarningReason | None, str | None]:
    """Return the first warning that applies to a requested quantity, if any.

    Rules are checked in order (minimum, maximum, large change) and only the
    first match is reported. A zero threshold counts as unset. The large change
    rule needs a positive current quantity to divide by, so restocking from zero
    is never flagged by it.
    """

    if item.minimum and requested < item.minimum:
        return "below_minimum", f"Below minimum level ({format_quantity(item.minimum)})"

    if item.maximum and requested > item.maximum:
        return "above_maximum", f"Above maximum level ({format_quantity(item.maximum)})"

    if item.current > 0 and abs(requested - item.current) / item.current > large_change_ratio:
        percent = format_quantity(large_change_ratio * 100)
        return "large_change", f"Large stock change (>{percent}%)"

    return None, None


def reconcile_row(
    row: ParsedRow,
    item: InventoryItem,
    *,
    large_change_ratio: Decimal = DEFAULT_LARGE_CHANGE_RATIO,
) -> ReconciledUpdate:
    """Build the proposed update for one row and its matching item."""

    reason, message = classify(item, row.requested, large_change_ratio=large_change_ratio)
    return ReconciledUpdate(
        id=item.id,
        name=item.name,
        unit=item.unit,
        current=item.current,
        requested=row.requested,
        delta=row.requested - item.current,
        warning_reason=reason,
        warning_message=message,
        sku=item.sku,
    )


def reconcile_rows(
    rows: Iterable[ParsedRow],
    items: Iterable[InventoryItem],
    *,
    large_change_ratio: Decimal = DEFAULT_LARGE_CHANGE_RATIO,
) -> list[ReconciledUpdate]:
    """Reconcile parsed rows in upload order.

    `items` must be the snapshot the rows were parsed against. Repeated
    identifiers yield one update per row; nothing is merged or sorted here.
    """

    items_by_id: dict[str, InventoryItem] = {}
    for item in items:
        # First occurrence wins if the snapshot itself repeats an id.
        items_by_id.setdefault(item.id, item)

    updates: list[ReconciledUpdate] = []
    for row in rows:
        item = items_by_id.get(row.id)
        if item is None:
            raise KeyError(f"Row {row.source_row} references unknown item {row.id!r}; parse against the same snapshot")
        updates.append(reconcile_row(row, item, large_change_ratio=large_change_ratio))

    warning_count = sum(1 for update in updates if update.has_warning)
    logger.info(f"Reconciled {len(updates)} updates, {warning_count} with warnings")
    return updates
