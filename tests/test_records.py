"""Tests for transaction and movement ingestion."""

import pytest
from datetime import date
from decimal import Decimal

from fundbook.domain.errors import ValidationError
from fundbook.domain.journal import is_balanced


class TestRecordTransaction:
    """Tests for RecordService.record_transaction."""

    def test_categorized_cash_expense(self, record_service, tenant):
        transaction_id, postings = record_service.record_transaction(
            tenant, date(2024, 3, 1), "expense", Decimal("50"), category="Operations", payment_method="Cash"
        )
        txn = record_service.get_transaction(tenant, transaction_id)
        assert txn.account_code == "5100"
        assert txn.account == "cash"
        assert txn.created_at is not None
        assert [(p.account_code, p.debit, p.credit) for p in postings] == [
            ("5100", Decimal("50"), Decimal("0")),
            ("1000", Decimal("0"), Decimal("50")),
        ]

    def test_uncategorized_expense_has_no_postings(self, record_service, tenant):
        transaction_id, postings = record_service.record_transaction(
            tenant, date(2024, 3, 1), "expense", Decimal("50"), category="Travel", payment_method="Card"
        )
        assert postings == []
        assert record_service.get_transaction(tenant, transaction_id).account_code is None

    def test_amount_stored_as_magnitude(self, record_service, tenant):
        transaction_id, _ = record_service.record_transaction(
            tenant, date(2024, 3, 1), "income", Decimal("-250"), account="bank"
        )
        assert record_service.get_transaction(tenant, transaction_id).amount == Decimal("250")

    def test_transfer_postings_balance(self, record_service, tenant):
        _, postings = record_service.record_transaction(
            tenant, date(2024, 3, 1), "transfer", Decimal("200"), subtype="deposit"
        )
        assert is_balanced(postings)
        assert {p.account_code for p in postings} == {"1000", "1100"}

    def test_transfer_requires_subtype(self, record_service, tenant):
        with pytest.raises(ValidationError, match="subtype"):
            record_service.record_transaction(tenant, date(2024, 3, 1), "transfer", Decimal("200"))

    def test_invalid_type(self, record_service, tenant):
        with pytest.raises(ValidationError, match="Invalid transaction type"):
            record_service.record_transaction(tenant, date(2024, 3, 1), "refund", Decimal("5"))

    def test_invalid_account(self, record_service, tenant):
        with pytest.raises(ValidationError, match="Invalid account"):
            record_service.record_transaction(
                tenant, date(2024, 3, 1), "income", Decimal("5"), account="savings"
            )

    def test_get_missing_transaction(self, record_service, tenant):
        assert record_service.get_transaction(tenant, "nope") is None


class TestRecordMovement:
    """Tests for RecordService.record_movement."""

    def test_record_donation_to_bank(self, record_service, tenant):
        movement_id = record_service.record_movement(
            tenant, date(2024, 3, 2), "Donation", Decimal("75"), to_bank=True
        )
        movement = record_service.get_movement(tenant, movement_id)
        assert movement.type == "donation"
        assert movement.to_bank is True
        assert movement.amount == Decimal("75")

    def test_legacy_type_rejected(self, record_service, tenant):
        with pytest.raises(ValidationError, match="transaction log"):
            record_service.record_movement(tenant, date(2024, 3, 2), "cash-expense", Decimal("5"))

    def test_unknown_type_rejected(self, record_service, tenant):
        with pytest.raises(ValidationError, match="Invalid movement type"):
            record_service.record_movement(tenant, date(2024, 3, 2), "adjustment", Decimal("5"))

    def test_recorded_history_replays(self, record_service, engine, tenant):
        record_service.record_transaction(
            tenant, date(2024, 3, 1), "expense", Decimal("50"), category="Operations", payment_method="Cash"
        )
        record_service.record_movement(tenant, date(2024, 3, 2), "withdrawal", Decimal("200"))

        summary = engine.run_balance_replay(tenant, Decimal("15000"), Decimal("50000"))

        assert summary.final_cash_balance == Decimal("15150")
        assert summary.final_bank_balance == Decimal("49800")
