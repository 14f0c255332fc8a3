"""Pytest configuration for local package import resolution and shared fixtures."""

from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    # Ensure tests can import `stock_update` and `bulk_update` without package installation.
    sys.path.insert(0, project_root_str)

from stock_update.models import InventoryItem  # noqa: E402


@pytest.fixture
def raw_materials() -> list[InventoryItem]:
    """Small raw-material snapshot covering thresholds, zero stock and no thresholds."""

    return [
        InventoryItem(
            id="RM001",
            name="Steel Sheet",
            current=Decimal("150"),
            unit="kg",
            minimum=Decimal("50"),
            maximum=Decimal("300"),
        ),
        InventoryItem(id="RM002", name="Copper Wire", current=Decimal("0"), unit="m"),
        InventoryItem(id="RM003", name="Paint", current=Decimal("12.5"), unit="l", minimum=Decimal("5")),
    ]
