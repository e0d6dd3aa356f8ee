"""Ledger constants shared by the domain services."""

# Document store collections
ACCOUNTS_COLLECTION = "chart_of_accounts"
TRANSACTIONS_COLLECTION = "transactions"
MOVEMENTS_COLLECTION = "cash_movements"
AUDIT_LOGS_COLLECTION = "audit_logs"
SNAPSHOTS_COLLECTION = "balance_snapshots"

# Fixed chart of accounts codes
CASH_ACCOUNT_CODE = "1000"
BANK_ACCOUNT_CODE = "1100"
INCOME_ROOT_CODE = "4000"
DONATIONS_ACCOUNT_CODE = "4010"

ACCOUNT_TYPES = ("asset", "liability", "equity", "income", "expense")
DEBIT_NORMAL_TYPES = ("asset", "expense")
BALANCE_SHEET_TYPES = ("asset", "liability", "equity")

DISPLAY_CATEGORY = "category"
DISPLAY_SUBCATEGORY = "subcategory"
DISPLAY_HIDDEN = "hidden"
DISPLAY_OPTIONS = (DISPLAY_CATEGORY, DISPLAY_SUBCATEGORY, DISPLAY_HIDDEN)

# Balance-tracked accounts
CASH = "cash"
BANK = "bank"

LEGACY_CASH_EXPENSE = "cash-expense"

# transaction_id carried by snapshots written at the end of a full replay
SNAPSHOT_SENTINEL = "migration_final"

# Upper bound on records fetched per stream during a replay
REPLAY_PAGE_SIZE = 10000


__all__ = [
    "ACCOUNTS_COLLECTION",
    "TRANSACTIONS_COLLECTION",
    "MOVEMENTS_COLLECTION",
    "AUDIT_LOGS_COLLECTION",
    "SNAPSHOTS_COLLECTION",
    "CASH_ACCOUNT_CODE",
    "BANK_ACCOUNT_CODE",
    "INCOME_ROOT_CODE",
    "DONATIONS_ACCOUNT_CODE",
    "ACCOUNT_TYPES",
    "DEBIT_NORMAL_TYPES",
    "BALANCE_SHEET_TYPES",
    "DISPLAY_CATEGORY",
    "DISPLAY_SUBCATEGORY",
    "DISPLAY_HIDDEN",
    "DISPLAY_OPTIONS",
    "CASH",
    "BANK",
    "LEGACY_CASH_EXPENSE",
    "SNAPSHOT_SENTINEL",
    "REPLAY_PAGE_SIZE",
]
