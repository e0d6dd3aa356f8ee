"""Removal of legacy cash-expense duplicates from the movement log.

An earlier data model mirrored every cash expense into the movement log as a
``cash-expense`` movement. The expense itself lives in the transaction log,
so those movements double count cash outflows and are removed.
"""

import logging

from fundbook.database.base import DocumentStore
from fundbook.domain.constants import LEGACY_CASH_EXPENSE, MOVEMENTS_COLLECTION
from fundbook.domain.entities import CleanupSummary
from fundbook.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class LegacyCleanup:
    """Service for deleting legacy cash-expense movements."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def cleanup_legacy_cash_expenses(self, tenant: str) -> CleanupSummary:
        """Delete every movement of type ``cash-expense`` (in any letter case).

        Running it again on a cleaned history removes nothing.

        Returns:
            CleanupSummary with the number of movements checked and removed
        """
        checked = removed = failed = 0
        for movement in self.store.query(tenant, MOVEMENTS_COLLECTION):
            checked += 1
            if (movement.get("type") or "").lower() != LEGACY_CASH_EXPENSE:
                continue
            logger.info(
                "Removing legacy cash-expense movement %s (%s)",
                movement["id"],
                movement.get("description"),
            )
            try:
                if self.store.delete(tenant, MOVEMENTS_COLLECTION, movement["id"]):
                    removed += 1
            except PersistenceError as e:
                logger.error("Failed to remove movement %s: %s", movement["id"], e)
                failed += 1

        return CleanupSummary(checked=checked, removed=removed, failed=failed)
