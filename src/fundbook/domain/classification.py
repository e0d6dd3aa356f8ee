"""Classification of transactions and movements by balance effect.

Every record of either stream is mapped to exactly one RecordKind, and every
RecordKind has exactly one entry in BALANCE_EFFECTS. The replay engine reads
balance deltas from that table only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fundbook.domain.constants import BANK, CASH, LEGACY_CASH_EXPENSE
from fundbook.domain.entities import Movement, Transaction


class RecordKind(Enum):
    """Closed set of record kinds understood by the ledger."""

    EXPENSE_CASH = "expense_cash"
    EXPENSE_BANK = "expense_bank"
    INCOME_CASH = "income_cash"
    INCOME_BANK = "income_bank"
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    DONATION_CASH = "donation_cash"
    DONATION_BANK = "donation_bank"
    LEGACY_CASH_EXPENSE = "legacy_cash_expense"
    UNKNOWN = "unknown"
    UNTRACKED = "untracked"


@dataclass(frozen=True)
class BalanceEffect:
    """Direction in which a record moves the cash and bank balances.

    ``cash`` and ``bank`` are -1, 0 or +1 multipliers for ``abs(amount)``.
    """

    cash: int
    bank: int
    classification: str

    @property
    def accounts(self) -> tuple[str, ...]:
        affected = []
        if self.cash:
            affected.append(CASH)
        if self.bank:
            affected.append(BANK)
        return tuple(affected)


BALANCE_EFFECTS: dict[RecordKind, BalanceEffect] = {
    RecordKind.EXPENSE_CASH: BalanceEffect(cash=-1, bank=0, classification="outflow"),
    RecordKind.EXPENSE_BANK: BalanceEffect(cash=0, bank=-1, classification="outflow"),
    RecordKind.INCOME_CASH: BalanceEffect(cash=1, bank=0, classification="inflow"),
    RecordKind.INCOME_BANK: BalanceEffect(cash=0, bank=1, classification="inflow"),
    RecordKind.WITHDRAWAL: BalanceEffect(cash=1, bank=-1, classification="transfer"),
    RecordKind.DEPOSIT: BalanceEffect(cash=-1, bank=1, classification="transfer"),
    RecordKind.DONATION_CASH: BalanceEffect(cash=1, bank=0, classification="inflow"),
    RecordKind.DONATION_BANK: BalanceEffect(cash=0, bank=1, classification="inflow"),
    RecordKind.LEGACY_CASH_EXPENSE: BalanceEffect(cash=-1, bank=0, classification="outflow"),
    # Unrecognized movement types are treated as cash outflows
    RecordKind.UNKNOWN: BalanceEffect(cash=-1, bank=0, classification="outflow"),
    RecordKind.UNTRACKED: BalanceEffect(cash=0, bank=0, classification="none"),
}

CASH_PAYMENT_METHODS = ("cash",)
BANK_PAYMENT_METHODS = ("card", "bank transfer", "bank_transfer", "bank")


def payment_account(payment_method: Optional[str]) -> Optional[str]:
    """Map a payment method label to the balance-tracked account it draws on.

    Returns:
        "cash", "bank", or None for methods that touch neither
    """
    if not payment_method:
        return None
    method = payment_method.strip().lower()
    if method in CASH_PAYMENT_METHODS:
        return CASH
    if method in BANK_PAYMENT_METHODS:
        return BANK
    return None


def _expense_account(transaction: Transaction) -> Optional[str]:
    if transaction.payment_method:
        return payment_account(transaction.payment_method)
    if transaction.account in (CASH, BANK):
        return transaction.account
    return None


def _transfer_kind(transaction: Transaction) -> RecordKind:
    if transaction.subtype == "withdrawal":
        return RecordKind.WITHDRAWAL
    if transaction.subtype == "deposit":
        return RecordKind.DEPOSIT
    route = (transaction.from_account, transaction.to_account)
    if route == (BANK, CASH):
        return RecordKind.WITHDRAWAL
    if route == (CASH, BANK):
        return RecordKind.DEPOSIT
    return RecordKind.UNTRACKED


def classify_transaction(transaction: Transaction) -> RecordKind:
    """Classify a record of the transaction log.

    Voided records, expenses paid by a method that is neither cash nor
    card/bank transfer, and unrecognized types do not move either balance.
    """
    if transaction.voided:
        return RecordKind.UNTRACKED

    if transaction.type == "expense":
        account = _expense_account(transaction)
        if account == CASH:
            return RecordKind.EXPENSE_CASH
        if account == BANK:
            return RecordKind.EXPENSE_BANK
        return RecordKind.UNTRACKED

    if transaction.type == "income":
        return RecordKind.INCOME_BANK if transaction.account == BANK else RecordKind.INCOME_CASH

    if transaction.type == "transfer":
        return _transfer_kind(transaction)

    return RecordKind.UNTRACKED


def classify_movement(movement: Movement) -> RecordKind:
    """Classify a record of the cash movement log."""
    if movement.type == "withdrawal":
        return RecordKind.WITHDRAWAL
    if movement.type == "deposit":
        return RecordKind.DEPOSIT
    if movement.type == "donation":
        return RecordKind.DONATION_BANK if movement.to_bank else RecordKind.DONATION_CASH
    if movement.type == LEGACY_CASH_EXPENSE:
        return RecordKind.LEGACY_CASH_EXPENSE
    return RecordKind.UNKNOWN


def balance_effect(kind: RecordKind) -> BalanceEffect:
    """Look up the balance effect of a record kind."""
    return BALANCE_EFFECTS[kind]
