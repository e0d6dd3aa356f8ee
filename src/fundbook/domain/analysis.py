"""Cash data overview for administrators."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from fundbook.database.base import DocumentStore
from fundbook.database.mappers import movement_to_domain, transaction_to_domain
from fundbook.domain.constants import (
    LEGACY_CASH_EXPENSE,
    MOVEMENTS_COLLECTION,
    REPLAY_PAGE_SIZE,
    TRANSACTIONS_COLLECTION,
)
from fundbook.domain.entities import BucketTotal, CashAnalysis, Movement, MovementTypeTotal
from fundbook.domain.errors import ValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

PAYMENT_METHODS = ("Cash", "Card", "Bank Transfer")
INFLOW_MOVEMENT_TYPES = ("deposit", "donation", "cash-in")
OUTFLOW_MOVEMENT_TYPES = ("withdrawal", LEGACY_CASH_EXPENSE, "cash-out")


def movement_direction(movement: Movement) -> str:
    """Classify a movement as "in" or "out" for reporting.

    Known types use their declared direction. Unknown types fall back to
    the sign of the amount: positive is money in, anything else money out.
    This differs from the replay, which treats every unknown type as a
    cash outflow.
    """
    if movement.type in INFLOW_MOVEMENT_TYPES:
        return "in"
    if movement.type in OUTFLOW_MOVEMENT_TYPES:
        return "out"
    return "in" if movement.amount > 0 else "out"


class CashAnalysisService:
    """Service for summarizing the transaction and movement logs."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def analyze_cash_data(self, tenant: str, top_categories: Optional[int] = 5) -> CashAnalysis:
        """Bucket transactions by payment method and category, movements by type.

        Args:
            tenant: Tenant scope
            top_categories: Number of categories to keep, largest total first
                (None keeps all)

        Returns:
            CashAnalysis report
        """
        transactions = []
        for document in self.store.query(tenant, TRANSACTIONS_COLLECTION, limit=REPLAY_PAGE_SIZE):
            try:
                transactions.append(transaction_to_domain(document))
            except ValidationError as e:
                logger.warning("Skipping unreadable transaction: %s", e)

        movements = []
        for document in self.store.query(tenant, MOVEMENTS_COLLECTION, limit=REPLAY_PAGE_SIZE):
            try:
                movements.append(movement_to_domain(document))
            except ValidationError as e:
                logger.warning("Skipping unreadable movement: %s", e)

        method_counts: dict[str, int] = defaultdict(int)
        method_totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        category_counts: dict[str, int] = defaultdict(int)
        category_totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        transaction_total = ZERO

        for txn in transactions:
            method = txn.payment_method if txn.payment_method in PAYMENT_METHODS else "Other"
            method_counts[method] += 1
            method_totals[method] += txn.amount
            category = txn.category or "Uncategorized"
            category_counts[category] += 1
            category_totals[category] += txn.amount
            transaction_total += txn.amount

        by_payment_method = tuple(
            BucketTotal(name=method, count=method_counts[method], total=method_totals[method])
            for method in (*PAYMENT_METHODS, "Other")
            if method_counts[method] or method != "Other"
        )
        categories = sorted(
            (BucketTotal(name=name, count=category_counts[name], total=category_totals[name]) for name in category_counts),
            key=lambda bucket: (-bucket.total, bucket.name),
        )
        if top_categories is not None:
            categories = categories[:top_categories]

        type_counts: dict[str, int] = defaultdict(int)
        type_in: dict[str, Decimal] = defaultdict(lambda: ZERO)
        type_out: dict[str, Decimal] = defaultdict(lambda: ZERO)
        total_in = total_out = ZERO

        for movement in movements:
            type_counts[movement.type] += 1
            if movement_direction(movement) == "in":
                type_in[movement.type] += movement.amount
                total_in += movement.amount
            else:
                type_out[movement.type] += abs(movement.amount)
                total_out += abs(movement.amount)

        by_movement_type = tuple(
            MovementTypeTotal(
                type=movement_type,
                count=type_counts[movement_type],
                total_in=type_in[movement_type],
                total_out=type_out[movement_type],
            )
            for movement_type in sorted(type_counts)
        )

        return CashAnalysis(
            transaction_count=len(transactions),
            transaction_total=transaction_total,
            by_payment_method=by_payment_method,
            top_categories=tuple(categories),
            movement_count=len(movements),
            movement_total_in=total_in,
            movement_total_out=total_out,
            by_movement_type=by_movement_type,
            legacy_cash_expense_count=type_counts.get(LEGACY_CASH_EXPENSE, 0),
        )
