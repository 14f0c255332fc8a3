"""Confirmation gate in front of the external apply-stock-update call."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .errors import CommitError
from .models import CommitResult, ReconciledUpdate

logger = logging.getLogger(__name__)

ApplyFn = Callable[[list[ReconciledUpdate]], CommitResult]


class CommitGate:
    """Hold a reviewed batch until the user confirms, then apply it once.

    The batch is sent as a whole, warnings included. A failed apply keeps the
    batch so it can be retried without re-uploading; a successful one discards
    it and closes the gate.
    """

    def __init__(self, updates: Sequence[ReconciledUpdate], apply_fn: ApplyFn) -> None:
        self._updates = list(updates)
        self._apply_fn = apply_fn
        self._committed = False

    @property
    def updates(self) -> list[ReconciledUpdate]:
        return list(self._updates)

    @property
    def committed(self) -> bool:
        return self._committed

    def commit(self, confirmed: bool) -> CommitResult | None:
        """Apply the held batch when `confirmed`; return None if it was not.

        Raises `CommitError` for an empty batch or after a successful commit.
        """

        if self._committed:
            raise CommitError("Updates have already been committed")
        if not self._updates:
            raise CommitError("There are no updates to commit")
        if not confirmed:
            logger.info("Commit not confirmed; holding updates")
            return None

        logger.info(f"Applying {len(self._updates)} stock updates")
        result = self._apply_fn(list(self._updates))
        if result.success:
            self._committed = True
            self._updates = []
            logger.info(f"Stock update applied: {result.message}")
        else:
            logger.warning(f"Stock update failed: {result.message}")
        return result

    def cancel(self) -> None:
        """Discard the held batch without applying it."""

        logger.info(f"Discarding {len(self._updates)} pending stock updates")
        self._updates = []
