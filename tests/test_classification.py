"""Tests for record classification and the balance effect table."""

import pytest
from datetime import date
from decimal import Decimal

from fundbook.domain.classification import (
    BALANCE_EFFECTS,
    RecordKind,
    balance_effect,
    classify_movement,
    classify_transaction,
    payment_account,
)
from fundbook.domain.entities import Movement, Transaction


def _txn(**kwargs):
    fields = {"id": "t1", "date": date(2024, 3, 1), "type": "expense", "amount": Decimal("50")}
    fields.update(kwargs)
    return Transaction(**fields)


def _movement(**kwargs):
    fields = {"id": "m1", "date": date(2024, 3, 1), "type": "deposit", "amount": Decimal("50")}
    fields.update(kwargs)
    return Movement(**fields)


def test_every_kind_has_an_effect():
    assert set(BALANCE_EFFECTS) == set(RecordKind)


@pytest.mark.parametrize(
    "kind, cash, bank",
    [
        (RecordKind.EXPENSE_CASH, -1, 0),
        (RecordKind.EXPENSE_BANK, 0, -1),
        (RecordKind.INCOME_CASH, 1, 0),
        (RecordKind.INCOME_BANK, 0, 1),
        (RecordKind.WITHDRAWAL, 1, -1),
        (RecordKind.DEPOSIT, -1, 1),
        (RecordKind.DONATION_CASH, 1, 0),
        (RecordKind.DONATION_BANK, 0, 1),
        (RecordKind.LEGACY_CASH_EXPENSE, -1, 0),
        (RecordKind.UNKNOWN, -1, 0),
        (RecordKind.UNTRACKED, 0, 0),
    ],
)
def test_balance_effects(kind, cash, bank):
    effect = balance_effect(kind)
    assert (effect.cash, effect.bank) == (cash, bank)


def test_effect_accounts():
    assert balance_effect(RecordKind.WITHDRAWAL).accounts == ("cash", "bank")
    assert balance_effect(RecordKind.EXPENSE_BANK).accounts == ("bank",)
    assert balance_effect(RecordKind.UNTRACKED).accounts == ()


@pytest.mark.parametrize(
    "method, expected",
    [
        ("Cash", "cash"),
        ("Card", "bank"),
        ("Bank Transfer", "bank"),
        (" bank_transfer ", "bank"),
        ("Cheque", None),
        (None, None),
        ("", None),
    ],
)
def test_payment_account(method, expected):
    assert payment_account(method) == expected


class TestClassifyTransaction:
    """Tests for transaction classification."""

    def test_cash_expense(self):
        assert classify_transaction(_txn(payment_method="Cash")) is RecordKind.EXPENSE_CASH

    def test_card_expense(self):
        assert classify_transaction(_txn(payment_method="Card")) is RecordKind.EXPENSE_BANK

    def test_expense_falls_back_to_account(self):
        assert classify_transaction(_txn(account="bank")) is RecordKind.EXPENSE_BANK

    def test_payment_method_takes_precedence_over_account(self):
        assert classify_transaction(_txn(payment_method="Cash", account="bank")) is RecordKind.EXPENSE_CASH

    def test_expense_with_other_method_is_untracked(self):
        assert classify_transaction(_txn(payment_method="Cheque")) is RecordKind.UNTRACKED

    def test_income(self):
        assert classify_transaction(_txn(type="income", account="bank")) is RecordKind.INCOME_BANK
        assert classify_transaction(_txn(type="income")) is RecordKind.INCOME_CASH

    def test_transfer_by_subtype(self):
        assert classify_transaction(_txn(type="transfer", subtype="withdrawal")) is RecordKind.WITHDRAWAL
        assert classify_transaction(_txn(type="transfer", subtype="deposit")) is RecordKind.DEPOSIT

    def test_transfer_by_route(self):
        txn = _txn(type="transfer", from_account="cash", to_account="bank")
        assert classify_transaction(txn) is RecordKind.DEPOSIT
        txn = _txn(type="transfer", from_account="bank", to_account="cash")
        assert classify_transaction(txn) is RecordKind.WITHDRAWAL

    def test_transfer_without_route_is_untracked(self):
        assert classify_transaction(_txn(type="transfer")) is RecordKind.UNTRACKED

    def test_voided_is_untracked(self):
        assert classify_transaction(_txn(payment_method="Cash", voided=True)) is RecordKind.UNTRACKED

    def test_unknown_type_is_untracked(self):
        assert classify_transaction(_txn(type="refund", payment_method="Cash")) is RecordKind.UNTRACKED


class TestClassifyMovement:
    """Tests for movement classification."""

    @pytest.mark.parametrize(
        "movement_type, expected",
        [
            ("withdrawal", RecordKind.WITHDRAWAL),
            ("deposit", RecordKind.DEPOSIT),
            ("donation", RecordKind.DONATION_CASH),
            ("cash-expense", RecordKind.LEGACY_CASH_EXPENSE),
            ("adjustment", RecordKind.UNKNOWN),
        ],
    )
    def test_movement_kinds(self, movement_type, expected):
        assert classify_movement(_movement(type=movement_type)) is expected

    def test_donation_to_bank(self):
        assert classify_movement(_movement(type="donation", to_bank=True)) is RecordKind.DONATION_BANK
