"""Tests for CLI commands."""

import pytest
from fundbook.cli.main import cli
from fundbook.database.factories import create_sqlite_store
from fundbook.domain.constants import MOVEMENTS_COLLECTION


@pytest.fixture
def invoke(cli_runner, db_path, tenant):
    """Invoke the CLI against the temporary database and tenant."""

    def _invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", db_path, "--tenant", tenant, *args], **kwargs)

    return _invoke


@pytest.fixture
def seeded(invoke):
    result = invoke("seed-chart")
    assert result.exit_code == 0
    return result


def _recorded_id(result):
    # "Recorded expense <id>"
    return result.output.splitlines()[0].split()[-1]


def test_help_does_not_open_store(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "seed-chart" in result.output
    assert "replay" in result.output


class TestChartCommands:
    """Tests for seed-chart and category commands."""

    def test_seed_chart(self, invoke):
        result = invoke("seed-chart")
        assert result.exit_code == 0
        assert "Created 5 account(s)" in result.output

        result = invoke("seed-chart")
        assert result.exit_code == 0
        assert "already seeded" in result.output

    def test_category_list_empty(self, invoke):
        result = invoke("category", "list")
        assert result.exit_code == 0
        assert "No categories found" in result.output

    def test_category_list(self, invoke, seeded):
        invoke(
            "account", "create", "5110", "Supplies",
            "--display-as", "subcategory", "--parent", "5100",
            "--category", "Operations", "--subcategory", "Supplies",
            "--legacy-subcategory-id", "SUB-003",
        )
        result = invoke("category", "list")
        assert result.exit_code == 0
        assert "5100 Operations (CAT-001)" in result.output
        assert "  Supplies (SUB-003)" in result.output


class TestAccountCommands:
    """Tests for account commands."""

    def test_create_and_resolve(self, invoke, seeded):
        result = invoke("account", "create", "5200", "Programs", "--display-as", "category", "--category", "Programs")
        assert result.exit_code == 0
        assert "Created account 5200 'Programs'" in result.output

        result = invoke("account", "resolve", "Programs")
        assert result.exit_code == 0
        assert result.output.strip().endswith("5200")

    def test_create_duplicate(self, invoke, seeded):
        result = invoke("account", "create", "1000", "Cash again")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_resolve_legacy(self, invoke, seeded):
        result = invoke("account", "resolve", "CAT-001", "--legacy")
        assert result.exit_code == 0
        assert "5100" in result.output

    def test_resolve_miss(self, invoke, seeded):
        result = invoke("account", "resolve", "Travel")
        assert result.exit_code == 1
        assert "No account found for 'Travel'" in result.output

    def test_update_and_deactivate(self, invoke, seeded):
        result = invoke("account", "update", "5100", "--name", "Admin", "--budget-monthly", "250")
        assert result.exit_code == 0
        assert "Updated account 5100" in result.output

        result = invoke("account", "deactivate", "5100")
        assert result.exit_code == 0

        result = invoke("category", "list")
        assert "No categories found" in result.output
        result = invoke("category", "list", "--include-inactive")
        assert "[inactive]" in result.output

    def test_update_missing(self, invoke, seeded):
        result = invoke("account", "update", "9999", "--name", "Ghost")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestRecordCommands:
    """Tests for record and journal commands."""

    def test_record_expense_shows_postings(self, invoke, seeded):
        result = invoke(
            "record", "expense", "--date", "2024-03-01", "--amount", "50", "--category", "Operations"
        )
        assert result.exit_code == 0
        assert "Recorded expense" in result.output
        assert "5100" in result.output
        assert "1000" in result.output

        result = invoke("journal", _recorded_id(result))
        assert result.exit_code == 0
        assert "Transaction" in result.output
        assert "Payment:" in result.output

    def test_record_uncategorized_expense(self, invoke, seeded):
        result = invoke("record", "expense", "--date", "2024-03-01", "--amount", "50")
        assert result.exit_code == 0
        assert "uncategorized" in result.output

    def test_record_income(self, invoke, seeded):
        result = invoke("record", "income", "--date", "2024-03-01", "--amount", "250", "--account", "bank")
        assert result.exit_code == 0
        assert "1100" in result.output
        assert "4010" in result.output

    def test_record_invalid_amount(self, invoke, seeded):
        result = invoke("record", "expense", "--date", "2024-03-01", "--amount", "lots")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_record_movement(self, invoke, seeded, db_path, tenant):
        result = invoke("record", "movement", "--date", "2024-03-02", "--type", "donation", "--amount", "75", "--to-bank")
        assert result.exit_code == 0
        assert "Recorded donation" in result.output

        store = create_sqlite_store(database_path=db_path)
        [movement] = store.query(tenant, MOVEMENTS_COLLECTION)
        assert movement["toBank"] is True
        store.disconnect()

    def test_journal_missing_transaction(self, invoke, seeded):
        result = invoke("journal", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestReplayCommands:
    """Tests for replay, cleanup-legacy and analyze."""

    @pytest.fixture
    def history(self, invoke, seeded, db_path, tenant):
        invoke("record", "expense", "--date", "2024-03-01", "--amount", "50", "--category", "Operations")
        invoke("record", "movement", "--date", "2024-03-02", "--type", "withdrawal", "--amount", "200")
        store = create_sqlite_store(database_path=db_path)
        store.add(tenant, MOVEMENTS_COLLECTION, {"date": "2024-03-01", "type": "cash-expense", "amount": 50})
        store.disconnect()

    def test_replay_requires_opening_balances(self, invoke, history):
        result = invoke("replay")
        assert result.exit_code == 1
        assert "--opening-cash and --opening-bank are required" in result.output

    def test_cleanup_then_replay(self, invoke, history):
        result = invoke("analyze")
        assert result.exit_code == 0
        assert "1 legacy cash-expense movement(s) found" in result.output

        result = invoke("cleanup-legacy", "--yes")
        assert result.exit_code == 0
        assert "Legacy cash-expense movements removed: 1" in result.output

        result = invoke("replay", "--opening-cash", "15000", "--opening-bank", "50000")
        assert result.exit_code == 0
        assert "Records updated: 2/2" in result.output
        assert "Audit entries written: 3" in result.output
        assert "Final cash balance: 15150.00" in result.output
        assert "Final bank balance: 49800.00" in result.output

        result = invoke("replay", "--reuse-opening")
        assert result.exit_code == 0
        assert "Opening balances: cash 15000.00, bank 50000.00" in result.output
        assert "Final cash balance: 15150.00" in result.output

    def test_cleanup_requires_confirmation(self, invoke, history):
        result = invoke("cleanup-legacy", input="n\n")
        assert result.exit_code == 1
        assert "removed" not in result.output

    def test_dry_run(self, invoke, history):
        result = invoke("replay", "--opening-cash", "15000", "--opening-bank", "50000", "--dry-run")
        assert result.exit_code == 0
        assert "Records that would be updated: 3" in result.output
        assert "Final cash balance: 15100.00" in result.output
        assert "Dry run" in result.output

        result = invoke("replay", "--reuse-opening")
        assert result.exit_code == 1
        assert "No previous replay" in result.output

    def test_reuse_opening_conflicts_with_explicit_balances(self, invoke, history):
        result = invoke("replay", "--reuse-opening", "--opening-cash", "1")
        assert result.exit_code == 1
