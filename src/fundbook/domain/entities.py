"""Domain model entities for fundbook.

These are pure data classes representing ledger concepts, independent of
the document layout used by the store. Documents are converted to and from
these entities in ``fundbook.database.mappers``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    code: str
    name: str
    account_type: str
    display_as: str
    normal_balance: str
    financial_statement: str
    level: int = 1
    parent_code: Optional[str] = None
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    legacy_category_id: Optional[str] = None
    legacy_subcategory_id: Optional[str] = None
    is_active: bool = True
    system_account: bool = False
    budget_monthly: Decimal = Decimal("0")
    budget_annual: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    created_by: str = "system"


@dataclass(frozen=True)
class Transaction:
    """Expense, income or transfer recorded in the transaction log."""

    id: str
    date: date
    type: str
    amount: Decimal
    subtype: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    account: Optional[str] = None
    payment_method: Optional[str] = None
    from_account: Optional[str] = None
    to_account: Optional[str] = None
    description: Optional[str] = None
    account_code: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    sequence: Optional[int] = None
    voided: bool = False
    cash_balance_after: Optional[Decimal] = None
    bank_balance_after: Optional[Decimal] = None


@dataclass(frozen=True)
class Movement:
    """Operational cash flow event (deposit, withdrawal, donation)."""

    id: str
    date: date
    type: str
    amount: Decimal
    to_bank: bool = False
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    sequence: Optional[int] = None
    cash_balance_after: Optional[Decimal] = None
    bank_balance_after: Optional[Decimal] = None


@dataclass(frozen=True)
class JournalPosting:
    """One debit or credit line of a journal entry."""

    account_code: str
    debit: Decimal
    credit: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable record of a balance change made by a replay."""

    transaction_id: str
    transaction_type: str
    account: str
    balance_before: Decimal
    balance_after: Decimal
    change_amount: Decimal
    description: str
    date: date
    is_migration: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class BalanceSnapshot:
    """Point-in-time balance for the cash or bank account."""

    account: str
    balance: Decimal
    transaction_id: str
    opening_balance: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    sequence: Optional[int] = None


@dataclass(frozen=True)
class SubcategoryListing:
    """Subcategory as presented to the category picker."""

    id: str
    name: str


@dataclass(frozen=True)
class CategoryListing:
    """Category derived from a category-level account."""

    id: str
    legacy_id: str
    code: str
    name: str
    subcategories: tuple[SubcategoryListing, ...] = ()
    active: bool = True


@dataclass(frozen=True)
class ReplaySummary:
    """Aggregate result of a balance replay run."""

    updated_count: int
    audit_count: int
    final_cash_balance: Decimal
    final_bank_balance: Decimal
    attempted_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    snapshot_count: int = 0


@dataclass(frozen=True)
class CleanupSummary:
    """Result of a legacy cleanup pass."""

    checked: int
    removed: int
    failed: int = 0


@dataclass(frozen=True)
class BucketTotal:
    """Count and total of a group of transactions."""

    name: str
    count: int
    total: Decimal


@dataclass(frozen=True)
class MovementTypeTotal:
    """Inflow and outflow totals for one movement type."""

    type: str
    count: int
    total_in: Decimal
    total_out: Decimal

    @property
    def is_legacy(self) -> bool:
        return self.type == "cash-expense"


@dataclass(frozen=True)
class CashAnalysis:
    """Read-only overview of the transaction and movement logs."""

    transaction_count: int
    transaction_total: Decimal
    by_payment_method: tuple[BucketTotal, ...]
    top_categories: tuple[BucketTotal, ...]
    movement_count: int
    movement_total_in: Decimal
    movement_total_out: Decimal
    by_movement_type: tuple[MovementTypeTotal, ...]
    legacy_cash_expense_count: int = 0

    @property
    def movement_net(self) -> Decimal:
        return self.movement_total_in - self.movement_total_out
