"""Mapper functions to convert between stored documents and domain entities.

Stored transactions and movements are written by request-handling code
outside this package, so field names follow that code's conventions
(``paymentMethod``, ``toBank``, ``createdAt``). This layer isolates those
names from the domain entities.
"""

from typing import Any, Optional

from fundbook.database.base import Document
from fundbook.domain import entities as domain
from fundbook.domain.errors import ValidationError
from fundbook.utils.amount_parser import to_decimal
from fundbook.utils.date_parser import parse_record_date, parse_timestamp


def _optional_decimal(value: Any):
    if value is None or value == "":
        return None
    return to_decimal(value)


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _created_at(document: Document):
    for field in ("createdAt", "created_at", "timestamp"):
        if document.get(field) not in (None, ""):
            return parse_timestamp(document[field])
    return None


def _record_fields(document: Document, kind: str) -> dict[str, Any]:
    record_id = document.get("id")
    if not record_id:
        raise ValidationError(f"{kind} document has no id")
    try:
        record_date = parse_record_date(document.get("date"))
        amount = to_decimal(document.get("amount"))
        cash_after = _optional_decimal(document.get("cash_balance_after"))
        bank_after = _optional_decimal(document.get("bank_balance_after"))
    except ValueError as e:
        raise ValidationError(f"Invalid {kind} '{record_id}': {e}") from e
    return {
        "id": str(record_id),
        "date": record_date,
        "amount": amount,
        "created_at": _created_at(document),
        "sequence": document.get("sequence"),
        "cash_balance_after": cash_after,
        "bank_balance_after": bank_after,
    }


def account_to_domain(document: Document) -> domain.Account:
    """Convert a chart of accounts document to a domain Account entity."""
    return domain.Account(
        code=document["account_code"],
        name=document.get("account_name") or document["account_code"],
        account_type=document.get("account_type", "expense"),
        display_as=document.get("display_as", "hidden"),
        normal_balance=document.get("normal_balance", "debit"),
        financial_statement=document.get("financial_statement", "income_statement"),
        level=document.get("level") or 1,
        parent_code=document.get("parent_code"),
        category_name=document.get("category_name"),
        subcategory_name=document.get("subcategory_name"),
        legacy_category_id=document.get("legacy_category_id"),
        legacy_subcategory_id=document.get("legacy_subcategory_id"),
        is_active=document.get("is_active") is not False,
        system_account=bool(document.get("system_account", False)),
        budget_monthly=to_decimal(document.get("budget_monthly")),
        budget_annual=to_decimal(document.get("budget_annual")),
        created_at=parse_timestamp(document.get("created_at")),
        created_by=document.get("created_by") or "system",
    )


def transaction_to_domain(document: Document) -> domain.Transaction:
    """Convert a transaction document to a domain Transaction entity.

    Raises:
        ValidationError: If the id, date or amount cannot be read
    """
    metadata = document.get("metadata") or {}
    payment_method = document.get("paymentMethod") or metadata.get("paymentMethod")
    return domain.Transaction(
        type=(document.get("type") or "").lower(),
        subtype=_optional_str(document.get("subtype")),
        category=_optional_str(document.get("category")),
        subcategory=_optional_str(document.get("subcategory")),
        account=_optional_str(document.get("account")),
        payment_method=_optional_str(payment_method),
        from_account=_optional_str(document.get("fromAccount")),
        to_account=_optional_str(document.get("toAccount")),
        description=_optional_str(document.get("description")),
        account_code=_optional_str(document.get("account_code")),
        metadata=dict(metadata),
        voided=document.get("voided") is True,
        **_record_fields(document, "transaction"),
    )


def movement_to_domain(document: Document) -> domain.Movement:
    """Convert a cash movement document to a domain Movement entity.

    Raises:
        ValidationError: If the id, date or amount cannot be read
    """
    return domain.Movement(
        type=(document.get("type") or "").lower(),
        to_bank=bool(document.get("toBank", False)),
        description=_optional_str(document.get("description")),
        **_record_fields(document, "movement"),
    )


def audit_entry_to_document(entry: domain.AuditLogEntry) -> Document:
    """Convert an AuditLogEntry to a storable document."""
    return {
        "transaction_id": entry.transaction_id,
        "transaction_type": entry.transaction_type,
        "account": entry.account,
        "balance_before": entry.balance_before,
        "balance_after": entry.balance_after,
        "change_amount": entry.change_amount,
        "description": entry.description,
        "date": entry.date,
        "is_migration": entry.is_migration,
        "created_at": entry.created_at,
    }


def audit_entry_to_domain(document: Document) -> domain.AuditLogEntry:
    """Convert an audit log document to a domain AuditLogEntry."""
    return domain.AuditLogEntry(
        transaction_id=document["transaction_id"],
        transaction_type=document["transaction_type"],
        account=document["account"],
        balance_before=to_decimal(document["balance_before"]),
        balance_after=to_decimal(document["balance_after"]),
        change_amount=to_decimal(document["change_amount"]),
        description=document.get("description") or "",
        date=parse_record_date(document["date"]),
        is_migration=bool(document.get("is_migration", False)),
        created_at=parse_timestamp(document.get("created_at")),
    )


def snapshot_to_document(snapshot: domain.BalanceSnapshot) -> Document:
    """Convert a BalanceSnapshot to a storable document."""
    return {
        "account": snapshot.account,
        "balance": snapshot.balance,
        "transaction_id": snapshot.transaction_id,
        "opening_balance": snapshot.opening_balance,
        "created_at": snapshot.created_at,
    }


def snapshot_to_domain(document: Document) -> domain.BalanceSnapshot:
    """Convert a balance snapshot document to a domain BalanceSnapshot."""
    return domain.BalanceSnapshot(
        account=document["account"],
        balance=to_decimal(document["balance"]),
        transaction_id=document.get("transaction_id") or "",
        opening_balance=_optional_decimal(document.get("opening_balance")),
        created_at=parse_timestamp(document.get("created_at")),
        sequence=document.get("sequence"),
    )
