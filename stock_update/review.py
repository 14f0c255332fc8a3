"""Helpers that turn a reconciliation pass into what the user reviews before commit."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import ItemCategory, ParseResult, ReconciledUpdate
from .normalize import format_quantity, round_to_places

MAX_DISPLAYED_ERRORS = 5


@dataclass(frozen=True, slots=True)
class PreviewSummary:
    update_count: int
    warning_count: int
    error_count: int

    @property
    def can_commit(self) -> bool:
        return self.update_count > 0


def summarize(updates: Sequence[ReconciledUpdate], parse_result: ParseResult) -> PreviewSummary:
    return PreviewSummary(
        update_count=len(updates),
        warning_count=sum(1 for update in updates if update.has_warning),
        error_count=len(parse_result.row_errors),
    )


def processing_message(summary: PreviewSummary) -> str:
    """Return the one-line status shown once an upload has been processed."""

    if summary.error_count:
        return f"{summary.update_count} valid updates found, {summary.error_count} errors."
    return f"{summary.update_count} updates ready for review."


def capped_errors(messages: Sequence[str], limit: int = MAX_DISPLAYED_ERRORS) -> list[str]:
    """Return at most `limit` messages plus a line counting the hidden ones."""

    shown = list(messages[:limit])
    hidden = len(messages) - len(shown)
    if hidden > 0:
        shown.append(f"...and {hidden} more errors")
    return shown


def change_percent(update: ReconciledUpdate) -> str:
    """Return the delta as a percentage of current stock, or "N/A" from zero."""

    if update.current <= 0:
        return "N/A"
    percent = update.delta / update.current * 100
    return format(round_to_places(percent, 1), "f")


def format_change(update: ReconciledUpdate) -> str:
    sign = "+" if update.delta > 0 else ""
    return f"{sign}{format_quantity(update.delta)} ({change_percent(update)}%)"


def render_preview(updates: Sequence[ReconciledUpdate], category: ItemCategory) -> str:
    """Render the review table as plain text columns."""

    headers = ["Name"]
    if category == "finished-goods":
        headers.append("SKU")
    headers.extend(["Current", "New", "Change", "Status"])

    table = [headers]
    for update in updates:
        row = [update.name]
        if category == "finished-goods":
            row.append(update.sku or "")
        row.extend(
            [
                f"{format_quantity(update.current)} {update.unit}",
                f"{format_quantity(update.requested)} {update.unit}",
                format_change(update),
                f"WARNING: {update.warning_message}" if update.has_warning else "OK",
            ]
        )
        table.append(row)

    widths = [max(len(row[index]) for row in table) for index in range(len(headers))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in table
    )
