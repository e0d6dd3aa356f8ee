"""Double-entry journal postings for single transactions."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.classification import payment_account
from fundbook.domain.constants import (
    BANK,
    BANK_ACCOUNT_CODE,
    CASH,
    CASH_ACCOUNT_CODE,
    DONATIONS_ACCOUNT_CODE,
)
from fundbook.domain.entities import JournalPosting, Transaction
from fundbook.domain.errors import ValidationError, unresolved_expense_account

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

TRANSFER_ROUTES = {
    "withdrawal": (BANK, CASH),
    "deposit": (CASH, BANK),
}


def ledger_code(account: Optional[str]) -> str:
    """Map "cash"/"bank" to its asset account code (cash if unspecified)."""
    return BANK_ACCOUNT_CODE if account == BANK else CASH_ACCOUNT_CODE


def _funding_account(transaction: Transaction) -> Optional[str]:
    if transaction.account in (CASH, BANK):
        return transaction.account
    return payment_account(transaction.payment_method)


def _transfer_route(transaction: Transaction) -> tuple[Optional[str], Optional[str]]:
    if transaction.from_account and transaction.to_account:
        return transaction.from_account, transaction.to_account
    return TRANSFER_ROUTES.get(transaction.subtype or "", (None, None))


def build_journal_entries(transaction: Transaction) -> list[JournalPosting]:
    """Build the balanced postings for one transaction.

    Expenses debit their expense account and credit cash or bank; income
    debits cash or bank and credits donations; transfers debit the
    destination and credit the source. Every posting uses ``abs(amount)``,
    so total debits always equal total credits.

    Args:
        transaction: Classified transaction

    Returns:
        Postings for the transaction, or an empty list for types the ledger
        does not recognize

    Raises:
        ValidationError: If an expense has no resolved account code
    """
    amount = abs(transaction.amount)
    description = transaction.description

    if transaction.type == "expense":
        if not transaction.account_code:
            raise ValidationError(unresolved_expense_account(transaction.id))
        return [
            JournalPosting(transaction.account_code, debit=amount, credit=ZERO, description=description),
            JournalPosting(
                ledger_code(_funding_account(transaction)),
                debit=ZERO,
                credit=amount,
                description=f"Payment: {description}",
            ),
        ]

    if transaction.type == "income":
        return [
            JournalPosting(ledger_code(transaction.account), debit=amount, credit=ZERO, description=description),
            JournalPosting(DONATIONS_ACCOUNT_CODE, debit=ZERO, credit=amount, description=description),
        ]

    if transaction.type == "transfer":
        source, destination = _transfer_route(transaction)
        if source is None or destination is None:
            logger.warning("Transfer %s has no source/destination; no postings built", transaction.id)
            return []
        return [
            JournalPosting(ledger_code(source), debit=ZERO, credit=amount, description=f"Transfer to {destination}"),
            JournalPosting(
                ledger_code(destination), debit=amount, credit=ZERO, description=f"Transfer from {source}"
            ),
        ]

    # TODO: decide whether unrecognized types should post to a suspense account
    logger.warning(
        "Unrecognized transaction type %r for %s; no postings built", transaction.type, transaction.id
    )
    return []


def is_balanced(postings: list[JournalPosting]) -> bool:
    """Return True if total debits equal total credits."""
    return sum((p.debit for p in postings), ZERO) == sum((p.credit for p in postings), ZERO)


class JournalService:
    """Builds journal postings, resolving expense accounts on demand."""

    def __init__(self, directory: AccountDirectory):
        self.directory = directory

    def journal_for(self, tenant: str, transaction: Transaction) -> list[JournalPosting]:
        """Build postings for a transaction, resolving its expense account if needed.

        Raises:
            ValidationError: If an expense's category resolves to no account
        """
        if transaction.type == "expense" and not transaction.account_code and transaction.category:
            code = self.directory.resolve_by_category(tenant, transaction.category, transaction.subcategory)
            if code is not None:
                transaction = replace(transaction, account_code=code)
        return build_journal_entries(transaction)
