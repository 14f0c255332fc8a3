"""Core typed models shared by the template, parser, reconciliation and commit modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Literal, TypeAlias

from .normalize import coerce_quantity

ItemCategory: TypeAlias = Literal["raw-materials", "finished-goods"]
WarningReason: TypeAlias = Literal["below_minimum", "above_maximum", "large_change"]
RowErrorCode: TypeAlias = Literal["invalid_quantity", "unknown_item"]

CATEGORIES: tuple[ItemCategory, ...] = ("raw-materials", "finished-goods")
DEFAULT_UNIT = "units"


def _first_present(record: dict[str, Any], *keys: str) -> Any:
    """Return the first value under `keys` that is neither missing nor empty."""

    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


@dataclass(frozen=True, slots=True)
class InventoryItem:
    """Read-only snapshot of one item owned by the inventory store."""

    id: str
    name: str
    current: Decimal
    unit: str = DEFAULT_UNIT
    minimum: Decimal | None = None
    maximum: Decimal | None = None
    sku: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> InventoryItem:
        """Build an item from a raw-material or finished-good API record.

        The two item listings name their fields differently, so each attribute
        is taken from whichever of its known field names is populated.
        """

        if record.get("id") in (None, ""):
            raise ValueError(f"Inventory record has no id: {record!r}")

        minimum = _first_present(record, "minStockLevel", "minLevel")
        maximum = _first_present(record, "maxStockLevel", "maxLevel")
        sku = _first_present(record, "sku")
        return cls(
            id=str(record["id"]),
            name=str(_first_present(record, "name", "material_name") or ""),
            current=coerce_quantity(_first_present(record, "stockQuantity", "currentStock") or 0),
            unit=str(_first_present(record, "unitOfMeasure", "unit") or DEFAULT_UNIT),
            minimum=None if minimum is None else coerce_quantity(minimum),
            maximum=None if maximum is None else coerce_quantity(maximum),
            sku=None if sku is None else str(sku),
        )


@dataclass(frozen=True, slots=True)
class ParsedRow:
    """One uploaded line that passed quantity and identifier validation."""

    id: str
    requested: Decimal
    source_row: int


@dataclass(frozen=True, slots=True)
class RowError:
    """Non-fatal problem with one uploaded line; the line is left out of the batch."""

    source_row: int
    code: RowErrorCode
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ParseResult:
    """Rows accepted from one upload plus the rows that were rejected."""

    rows: list[ParsedRow] = field(default_factory=list)
    row_errors: list[RowError] = field(default_factory=list)

    @property
    def error_messages(self) -> list[str]:
        """Return row errors as display strings, in file order."""

        return [error.message for error in self.row_errors]

    @property
    def has_errors(self) -> bool:
        return bool(self.row_errors)


@dataclass(frozen=True, slots=True)
class ReconciledUpdate:
    """Proposed stock change for one uploaded row, awaiting review and commit."""

    id: str
    name: str
    unit: str
    current: Decimal
    requested: Decimal
    delta: Decimal
    warning_reason: WarningReason | None = None
    warning_message: str | None = None
    sku: str | None = None

    @property
    def has_warning(self) -> bool:
        return self.warning_reason is not None

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the JSON shape the inventory API and reports use."""

        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "currentStock": str(self.current),
            "newStock": str(self.requested),
            "delta": str(self.delta),
            "hasWarning": self.has_warning,
            "warningReason": self.warning_reason,
            "warningMessage": self.warning_message,
        }
        if self.sku is not None:
            payload["sku"] = self.sku
        return payload


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Outcome reported by the apply-stock-update collaborator."""

    success: bool
    message: str
    applied_count: int = 0
