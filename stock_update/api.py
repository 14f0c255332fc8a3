"""HTTP client for the remote inventory API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import requests

from .models import CommitResult, InventoryItem, ItemCategory, ReconciledUpdate

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str]


class InventoryApiError(Exception):
    """The inventory API could not return a usable item listing."""


class InventoryApiClient:
    """Fetch item snapshots from, and apply stock updates to, the inventory API.

    The API authenticates with a token: in the URL path for reads, in the JSON
    body for writes. Write responses carry `errFlag` (0 on success) and a
    `message` to show the user.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Inventory API base URL is not configured")
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_items(self, category: ItemCategory) -> list[InventoryItem]:
        """Return the current snapshot of every item in `category`."""

        token = quote(self.token_provider(), safe="")
        url = f"{self.base_url}/{category}/get-all/{token}"
        logger.info(f"Fetching {category} from inventory API")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise InventoryApiError(f"Failed to fetch {category}: {str(e)}") from e
        except ValueError as e:
            raise InventoryApiError(f"Inventory API returned invalid JSON for {category}") from e

        records = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise InventoryApiError(f"Unexpected {category} listing shape: {type(records).__name__}")
        return [InventoryItem.from_record(record) for record in records]

    def apply_updates(self, category: ItemCategory, updates: list[ReconciledUpdate]) -> CommitResult:
        """Send the whole batch in one request and report what the API said.

        Failures are returned, not raised, so the caller keeps its batch and can
        retry. Nothing here retries on its own.
        """

        url = f"{self.base_url}/{category}/bulk-stock-update"
        body: dict[str, Any] = {
            "token": self.token_provider(),
            "updates": [update.to_payload() for update in updates],
        }
        try:
            response = self.session.post(url, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Bulk stock update request failed: {str(e)}")
            return CommitResult(success=False, message=f"Failed to update stock: {str(e)}")

        # Error statuses may still carry an errFlag/message body worth showing.
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("errFlag", 0) != 0:
            message = payload.get("message") or "Failed to update stock"
            logger.warning(f"Inventory API rejected bulk stock update: {message}")
            return CommitResult(success=False, message=message)

        try:
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Bulk stock update request failed: {str(e)}")
            return CommitResult(success=False, message=f"Failed to update stock: {str(e)}")

        if not isinstance(payload, dict):
            logger.warning("Bulk stock update returned a non-JSON response")
            return CommitResult(success=False, message="Failed to update stock: invalid response from server")

        message = payload.get("message") or f"{len(updates)} items updated successfully."
        return CommitResult(success=True, message=message, applied_count=len(updates))
