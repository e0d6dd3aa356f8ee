"""Commands for recording transactions and cash movements."""

import click
from fundbook.domain.entities import JournalPosting
from fundbook.domain.errors import DomainError, PersistenceError
from fundbook.domain.records import MOVEMENT_TYPES, RecordService
from fundbook.utils.amount_parser import parse_amount
from fundbook.utils.date_parser import parse_date
from fundbook.cli.error_handling import handle_domain_error

PAYMENT_METHOD_CHOICES = ("Cash", "Card", "Bank Transfer")


def echo_postings(postings: list[JournalPosting]) -> None:
    """Print journal postings as a debit/credit table."""
    if not postings:
        click.echo("No journal postings.")
        return
    click.echo(f"{'Account':<8} {'Debit':>12} {'Credit':>12}  Description")
    click.echo("-" * 60)
    for posting in postings:
        debit = f"{posting.debit:.2f}" if posting.debit else ""
        credit = f"{posting.credit:.2f}" if posting.credit else ""
        click.echo(f"{posting.account_code:<8} {debit:>12} {credit:>12}  {posting.description or ''}")


def _parse_inputs(ctx, date: str, amount: str):
    try:
        return parse_date(date), parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.group()
def record_group():
    """Record transactions and cash movements."""
    pass


@record_group.command("expense")
@click.option("--date", required=True, help="Transaction date (YYYY-MM-DD or relative like 'today')")
@click.option("--amount", required=True, help="Transaction amount (e.g., 50.00)")
@click.option("--category", help="Category label")
@click.option("--subcategory", help="Subcategory label")
@click.option(
    "--payment-method",
    type=click.Choice(PAYMENT_METHOD_CHOICES, case_sensitive=False),
    default="Cash",
    help="How the expense was paid (default: Cash)",
)
@click.option("--description", help="Transaction description")
@click.pass_context
def record_expense(
    ctx,
    date: str,
    amount: str,
    category: str | None,
    subcategory: str | None,
    payment_method: str,
    description: str | None,
):
    """Record an expense and show its journal postings.

    Examples:
        fundbook record expense --date 2024-03-01 --amount 50 --category Operations
        fundbook record expense --date today --amount 120 --payment-method Card \\
            --category Operations --subcategory Supplies
    """
    txn_date, txn_amount = _parse_inputs(ctx, date, amount)
    service = RecordService(ctx.obj["store"])

    try:
        transaction_id, postings = service.record_transaction(
            ctx.obj["tenant"],
            txn_date,
            "expense",
            txn_amount,
            category=category,
            subcategory=subcategory,
            payment_method=payment_method,
            description=description,
        )
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded expense {transaction_id}")
    if not postings:
        click.echo("Expense is uncategorized; no journal postings were built.")
        return
    echo_postings(postings)


@record_group.command("income")
@click.option("--date", required=True, help="Transaction date (YYYY-MM-DD or relative like 'today')")
@click.option("--amount", required=True, help="Transaction amount (e.g., 250.00)")
@click.option(
    "--account",
    type=click.Choice(["cash", "bank"], case_sensitive=False),
    default="cash",
    help="Account receiving the income (default: cash)",
)
@click.option("--category", help="Category label")
@click.option("--description", help="Transaction description")
@click.pass_context
def record_income(
    ctx,
    date: str,
    amount: str,
    account: str,
    category: str | None,
    description: str | None,
):
    """Record income and show its journal postings."""
    txn_date, txn_amount = _parse_inputs(ctx, date, amount)
    service = RecordService(ctx.obj["store"])

    try:
        transaction_id, postings = service.record_transaction(
            ctx.obj["tenant"],
            txn_date,
            "income",
            txn_amount,
            category=category,
            account=account.lower(),
            description=description,
        )
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded income {transaction_id}")
    echo_postings(postings)


@record_group.command("movement")
@click.option("--date", required=True, help="Movement date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--type",
    "movement_type",
    type=click.Choice(MOVEMENT_TYPES, case_sensitive=False),
    required=True,
    help="Movement type",
)
@click.option("--amount", required=True, help="Movement amount (e.g., 200.00)")
@click.option("--to-bank", is_flag=True, help="Donation was received into the bank account")
@click.option("--description", help="Movement description")
@click.pass_context
def record_movement(
    ctx,
    date: str,
    movement_type: str,
    amount: str,
    to_bank: bool,
    description: str | None,
):
    """Record a cash movement (deposit, withdrawal or donation).

    Examples:
        fundbook record movement --date 2024-03-02 --type withdrawal --amount 200
        fundbook record movement --date today --type donation --amount 75 --to-bank
    """
    movement_date, movement_amount = _parse_inputs(ctx, date, amount)
    service = RecordService(ctx.obj["store"])

    try:
        movement_id = service.record_movement(
            ctx.obj["tenant"],
            movement_date,
            movement_type,
            movement_amount,
            to_bank=to_bank,
            description=description,
        )
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded {movement_type.lower()} {movement_id}")


def register_commands(cli):
    """Register record commands with main CLI."""
    cli.add_command(record_group, name="record")
