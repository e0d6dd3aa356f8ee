"""Balance replay over the full transaction and movement history.

The replay merges the transaction log and the cash movement log into one
chronological sequence, recomputes the cash and bank running balances from
caller-supplied opening balances, stamps ``cash_balance_after`` /
``bank_balance_after`` onto every record that moved a balance, and writes an
audit entry per balance change plus a final snapshot per account.

Balances are computed for the whole sequence before the first write is
issued. The store offers no multi-document transactions: an interrupted run
leaves some records stamped and others stale, and is recovered by running
the replay again from the same opening balances.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional, Union

from fundbook.database.base import Document, DocumentStore
from fundbook.database.mappers import (
    audit_entry_to_document,
    movement_to_domain,
    snapshot_to_document,
    snapshot_to_domain,
    transaction_to_domain,
)
from fundbook.domain.classification import (
    RecordKind,
    balance_effect,
    classify_movement,
    classify_transaction,
)
from fundbook.domain.constants import (
    AUDIT_LOGS_COLLECTION,
    BANK,
    CASH,
    MOVEMENTS_COLLECTION,
    REPLAY_PAGE_SIZE,
    SNAPSHOTS_COLLECTION,
    SNAPSHOT_SENTINEL,
    TRANSACTIONS_COLLECTION,
)
from fundbook.domain.entities import (
    AuditLogEntry,
    BalanceSnapshot,
    Movement,
    ReplaySummary,
    Transaction,
)
from fundbook.domain.errors import PersistenceError, ValidationError
from fundbook.domain.persistence import FallbackWritePolicy
from fundbook.utils.amount_parser import to_decimal

logger = logging.getLogger(__name__)


@dataclass
class ReplayItem:
    """One record of either stream, with the balances computed for it."""

    collection: str
    record: Union[Transaction, Movement]
    document: Document
    kind: RecordKind
    position: int
    cash_before: Optional[Decimal] = None
    bank_before: Optional[Decimal] = None
    cash_after: Optional[Decimal] = None
    bank_after: Optional[Decimal] = None

    @property
    def transaction_type(self) -> str:
        if self.collection == MOVEMENTS_COLLECTION:
            return "movement"
        return self.record.type or "transaction"

    @property
    def sort_key(self) -> tuple:
        # Date, then creation time, then ingestion sequence, then stream order.
        # Records without a creation time sort first within their date.
        created_at = self.record.created_at
        sequence = self.record.sequence
        return (
            self.record.date,
            created_at is not None,
            created_at or datetime.min,
            sequence if sequence is not None else -1,
            self.position,
        )

    @property
    def stamps(self) -> dict[str, Decimal]:
        fields = {}
        if self.cash_after is not None:
            fields["cash_balance_after"] = self.cash_after
        if self.bank_after is not None:
            fields["bank_balance_after"] = self.bank_after
        return fields

    @property
    def description(self) -> str:
        record = self.record
        if record.description:
            return record.description
        label = getattr(record, "category", None) or record.type
        detail = getattr(record, "subcategory", None) or "N/A"
        return f"{label} - {detail}"

    def audit_entries(self) -> list[AuditLogEntry]:
        """Audit entries for each account whose balance this record changed."""
        entries = []
        changes = (
            (CASH, self.cash_before, self.cash_after),
            (BANK, self.bank_before, self.bank_after),
        )
        for account, before, after in changes:
            if after is None or after == before:
                continue
            entries.append(
                AuditLogEntry(
                    transaction_id=self.record.id,
                    transaction_type=self.transaction_type,
                    account=account,
                    balance_before=before,
                    balance_after=after,
                    change_amount=after - before,
                    description=self.description,
                    date=self.record.date,
                    is_migration=True,
                    created_at=datetime.now(UTC),
                )
            )
        return entries


@dataclass
class ReplayPlan:
    """Ordered replay items with their computed balances."""

    opening_cash_balance: Decimal
    opening_bank_balance: Decimal
    items: list[ReplayItem] = field(default_factory=list)
    final_cash_balance: Decimal = Decimal("0")
    final_bank_balance: Decimal = Decimal("0")
    skipped_count: int = 0

    @property
    def stamped_items(self) -> list[ReplayItem]:
        return [item for item in self.items if item.stamps]


class BalanceReplayEngine:
    """Service for rebuilding cash and bank running balances."""

    def __init__(self, store: DocumentStore, write_policy: Optional[FallbackWritePolicy] = None):
        """Initialize replay engine.

        Args:
            store: DocumentStore instance
            write_policy: Policy used to persist stamped balances
        """
        self.store = store
        self.write_policy = write_policy or FallbackWritePolicy()

    def load_items(self, tenant: str) -> tuple[list[ReplayItem], int]:
        """Fetch and classify both streams, in chronological order.

        Documents whose id, date or amount cannot be read are skipped.

        Returns:
            Tuple of (ordered items, number of skipped documents)
        """
        transactions = self.store.query(tenant, TRANSACTIONS_COLLECTION, limit=REPLAY_PAGE_SIZE)
        movements = self.store.query(tenant, MOVEMENTS_COLLECTION, limit=REPLAY_PAGE_SIZE)
        logger.info(
            "Loaded %d transactions and %d movements for tenant %s",
            len(transactions),
            len(movements),
            tenant,
        )

        items: list[ReplayItem] = []
        skipped = 0
        streams = (
            (TRANSACTIONS_COLLECTION, transactions, transaction_to_domain, classify_transaction),
            (MOVEMENTS_COLLECTION, movements, movement_to_domain, classify_movement),
        )
        for collection, documents, to_domain, classify in streams:
            for document in documents:
                try:
                    record = to_domain(document)
                except ValidationError as e:
                    logger.warning("Skipping unreadable %s document: %s", collection, e)
                    skipped += 1
                    continue
                kind = classify(record)
                if kind is RecordKind.UNKNOWN:
                    logger.warning(
                        "Unrecognized movement type %r for %s; treating as cash outflow",
                        record.type,
                        record.id,
                    )
                items.append(
                    ReplayItem(
                        collection=collection,
                        record=record,
                        document=document,
                        kind=kind,
                        position=len(items),
                    )
                )

        items.sort(key=lambda item: item.sort_key)
        return items, skipped

    def plan(self, tenant: str, opening_cash_balance: Any, opening_bank_balance: Any) -> ReplayPlan:
        """Compute running balances for the full history without writing anything."""
        items, skipped = self.load_items(tenant)
        return compute_balances(items, opening_cash_balance, opening_bank_balance, skipped)

    def run_balance_replay(
        self, tenant: str, opening_cash_balance: Any, opening_bank_balance: Any
    ) -> ReplaySummary:
        """Rebuild and persist running balances for a tenant.

        Per-record write failures are counted, never raised.

        Args:
            tenant: Tenant scope
            opening_cash_balance: Cash balance before the first record
            opening_bank_balance: Bank balance before the first record

        Returns:
            ReplaySummary with record, audit and snapshot counts and the final balances
        """
        plan = self.plan(tenant, opening_cash_balance, opening_bank_balance)

        attempted = updated = failed = audits = 0
        for item in plan.stamped_items:
            attempted += 1
            outcome = self.write_policy.write(
                self.store, tenant, item.collection, item.document, item.stamps
            )
            if not outcome.succeeded:
                failed += 1
                continue
            updated += 1
            audits += self._write_audit_entries(tenant, item)

        snapshots = self._write_snapshots(tenant, plan)

        summary = ReplaySummary(
            updated_count=updated,
            audit_count=audits,
            final_cash_balance=plan.final_cash_balance,
            final_bank_balance=plan.final_bank_balance,
            attempted_count=attempted,
            failed_count=failed,
            skipped_count=plan.skipped_count,
            snapshot_count=snapshots,
        )
        logger.info(
            "Replay for tenant %s: %d/%d records updated, %d failed, %d audit entries, "
            "final cash %s, final bank %s",
            tenant,
            updated,
            attempted,
            failed,
            audits,
            summary.final_cash_balance,
            summary.final_bank_balance,
        )
        return summary

    def _write_audit_entries(self, tenant: str, item: ReplayItem) -> int:
        written = 0
        for entry in item.audit_entries():
            try:
                self.store.add(tenant, AUDIT_LOGS_COLLECTION, audit_entry_to_document(entry))
                written += 1
            except PersistenceError as e:
                logger.warning("Failed to write audit entry for %s: %s", item.record.id, e)
        return written

    def _write_snapshots(self, tenant: str, plan: ReplayPlan) -> int:
        snapshots = (
            BalanceSnapshot(
                account=CASH,
                balance=plan.final_cash_balance,
                transaction_id=SNAPSHOT_SENTINEL,
                opening_balance=plan.opening_cash_balance,
                created_at=datetime.now(UTC),
            ),
            BalanceSnapshot(
                account=BANK,
                balance=plan.final_bank_balance,
                transaction_id=SNAPSHOT_SENTINEL,
                opening_balance=plan.opening_bank_balance,
                created_at=datetime.now(UTC),
            ),
        )
        written = 0
        for snapshot in snapshots:
            try:
                self.store.add(tenant, SNAPSHOTS_COLLECTION, snapshot_to_document(snapshot))
                written += 1
            except PersistenceError as e:
                logger.error("Failed to write %s balance snapshot: %s", snapshot.account, e)
        return written

    def latest_snapshots(self, tenant: str) -> dict[str, BalanceSnapshot]:
        """Return the most recent replay snapshot per account."""
        latest: dict[str, BalanceSnapshot] = {}
        documents = self.store.query(
            tenant, SNAPSHOTS_COLLECTION, filters={"transaction_id": SNAPSHOT_SENTINEL}
        )
        for document in documents:
            snapshot = snapshot_to_domain(document)
            # Query results come back in ingestion order
            latest[snapshot.account] = snapshot
        return latest

    def last_opening_balances(self, tenant: str) -> Optional[tuple[Decimal, Decimal]]:
        """Opening balances used by the most recent replay, if one recorded them.

        Returns:
            Tuple of (cash, bank) opening balances, or None
        """
        latest = self.latest_snapshots(tenant)
        cash = latest.get(CASH)
        bank = latest.get(BANK)
        if cash is None or bank is None or cash.opening_balance is None or bank.opening_balance is None:
            return None
        return cash.opening_balance, bank.opening_balance


def compute_balances(
    items: list[ReplayItem],
    opening_cash_balance: Any,
    opening_bank_balance: Any,
    skipped_count: int = 0,
) -> ReplayPlan:
    """Walk ordered items once, assigning before/after balances to each.

    The walk is strictly sequential: each record's balance depends on the
    previous record's balance for the same account.
    """
    cash = to_decimal(opening_cash_balance)
    bank = to_decimal(opening_bank_balance)
    plan = ReplayPlan(
        opening_cash_balance=cash,
        opening_bank_balance=bank,
        items=items,
        skipped_count=skipped_count,
    )

    for item in items:
        effect = balance_effect(item.kind)
        amount = abs(item.record.amount)
        item.cash_before, item.bank_before = cash, bank
        item.cash_after = item.bank_after = None
        if effect.cash:
            cash += effect.cash * amount
            item.cash_after = cash
        if effect.bank:
            bank += effect.bank * amount
            item.bank_after = bank

    plan.final_cash_balance = cash
    plan.final_bank_balance = bank
    return plan
