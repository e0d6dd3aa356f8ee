"""Transaction and movement ingestion."""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, Optional

from fundbook.database.base import DocumentStore
from fundbook.database.mappers import movement_to_domain, transaction_to_domain
from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.classification import payment_account
from fundbook.domain.constants import (
    BANK,
    CASH,
    LEGACY_CASH_EXPENSE,
    MOVEMENTS_COLLECTION,
    TRANSACTIONS_COLLECTION,
)
from fundbook.domain.entities import JournalPosting, Movement, Transaction
from fundbook.domain.errors import ValidationError
from fundbook.domain.journal import build_journal_entries

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ("expense", "income", "transfer")
TRANSFER_SUBTYPES = ("withdrawal", "deposit")
MOVEMENT_TYPES = ("deposit", "withdrawal", "donation")


class RecordService:
    """Service for writing transactions and movements to the logs.

    The store assigns every new record a monotonically increasing
    ``sequence``, which orders same-day records during a replay.
    """

    def __init__(self, store: DocumentStore, directory: Optional[AccountDirectory] = None):
        """Initialize record service.

        Args:
            store: DocumentStore instance
            directory: AccountDirectory used to resolve expense categories
        """
        self.store = store
        self.directory = directory or AccountDirectory(store)

    def record_transaction(
        self,
        tenant: str,
        txn_date: date,
        txn_type: str,
        amount: Decimal,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        payment_method: Optional[str] = None,
        account: Optional[str] = None,
        subtype: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> tuple[str, list[JournalPosting]]:
        """Write a transaction and build its journal postings.

        Amounts are stored as magnitudes. Expense categories are resolved to
        an account code; an expense whose category does not resolve is
        stored as uncategorized and gets no postings.

        Args:
            tenant: Tenant scope
            txn_date: Transaction date
            txn_type: "expense", "income" or "transfer"
            amount: Transaction amount (sign is ignored)
            category: Optional category label
            subcategory: Optional subcategory label
            payment_method: Optional payment method ("Cash", "Card", "Bank Transfer")
            account: "cash" or "bank"; derived from payment_method when omitted
            subtype: "withdrawal" or "deposit" for transfers
            description: Optional description
            metadata: Optional opaque metadata

        Returns:
            Tuple of (transaction id, journal postings)

        Raises:
            ValidationError: If the type, subtype or account is invalid
        """
        txn_type = txn_type.lower()
        if txn_type not in TRANSACTION_TYPES:
            raise ValidationError(
                f"Invalid transaction type '{txn_type}'. Expected one of: {', '.join(TRANSACTION_TYPES)}"
            )
        if txn_type == "transfer" and subtype not in TRANSFER_SUBTYPES:
            raise ValidationError("Transfers require a subtype of 'withdrawal' or 'deposit'")
        if account is None:
            account = payment_account(payment_method)
        if account is not None and account not in (CASH, BANK):
            raise ValidationError(f"Invalid account '{account}'. Expected 'cash' or 'bank'")

        account_code = None
        if txn_type == "expense" and category:
            account_code = self.directory.resolve_by_category(tenant, category, subcategory)

        document = {
            "date": txn_date.isoformat(),
            "type": txn_type,
            "subtype": subtype,
            "amount": abs(amount),
            "category": category,
            "subcategory": subcategory,
            "account": account,
            "paymentMethod": payment_method,
            "description": description,
            "account_code": account_code,
            "metadata": metadata or {},
            "createdAt": datetime.now(UTC),
        }
        transaction_id = self.store.add(tenant, TRANSACTIONS_COLLECTION, document)

        transaction = self.get_transaction(tenant, transaction_id)
        if txn_type == "expense" and account_code is None:
            logger.info("Transaction %s is uncategorized; no journal postings built", transaction_id)
            return transaction_id, []

        return transaction_id, build_journal_entries(transaction)

    def record_movement(
        self,
        tenant: str,
        movement_date: date,
        movement_type: str,
        amount: Decimal,
        to_bank: bool = False,
        description: Optional[str] = None,
    ) -> str:
        """Write an operational cash movement.

        Raises:
            ValidationError: If the movement type is not deposit, withdrawal or donation
        """
        movement_type = movement_type.lower()
        if movement_type == LEGACY_CASH_EXPENSE:
            raise ValidationError(
                "Cash expenses belong in the transaction log, not the movement log"
            )
        if movement_type not in MOVEMENT_TYPES:
            raise ValidationError(
                f"Invalid movement type '{movement_type}'. Expected one of: {', '.join(MOVEMENT_TYPES)}"
            )

        document = {
            "date": movement_date.isoformat(),
            "type": movement_type,
            "amount": abs(amount),
            "toBank": to_bank,
            "description": description,
            "createdAt": datetime.now(UTC),
        }
        return self.store.add(tenant, MOVEMENTS_COLLECTION, document)

    def get_transaction(self, tenant: str, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        document = self.store.get(tenant, TRANSACTIONS_COLLECTION, transaction_id)
        if document is None:
            return None
        return transaction_to_domain(document)

    def get_movement(self, tenant: str, movement_id: str) -> Optional[Movement]:
        """Get movement by ID.

        Returns:
            Movement entity or None if not found
        """
        document = self.store.get(tenant, MOVEMENTS_COLLECTION, movement_id)
        if document is None:
            return None
        return movement_to_domain(document)
