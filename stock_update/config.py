"""Environment-driven settings for the bulk stock update tools."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from .reconcile import DEFAULT_LARGE_CHANGE_RATIO

DEFAULT_TIMEOUT = 10.0


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _read_ratio(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        ratio = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if not ratio.is_finite() or ratio < 0:
        raise ValueError(f"{name} must be a non-negative number, got {raw!r}")
    return ratio


@dataclass(frozen=True, slots=True)
class Settings:
    api_base_url: str = ""
    api_token: str = ""
    api_timeout: float = DEFAULT_TIMEOUT
    large_change_ratio: Decimal = DEFAULT_LARGE_CHANGE_RATIO

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Read settings from `env`, defaulting to the process environment."""

        source = os.environ if env is None else env
        return cls(
            api_base_url=source.get("STOCK_API_BASE_URL", "").strip().rstrip("/"),
            api_token=source.get("STOCK_API_TOKEN", "").strip(),
            api_timeout=_read_float(source, "STOCK_API_TIMEOUT", DEFAULT_TIMEOUT),
            large_change_ratio=_read_ratio(source, "STOCK_LARGE_CHANGE_RATIO", DEFAULT_LARGE_CHANGE_RATIO),
        )

    @property
    def api_configured(self) -> bool:
        return bool(self.api_base_url)

    def token_provider(self) -> str:
        """Credentials provider handed to the API client."""

        return self.api_token
