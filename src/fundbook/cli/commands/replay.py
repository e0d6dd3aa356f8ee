"""Balance replay and legacy cleanup commands."""

import click
from fundbook.domain.cleanup import LegacyCleanup
from fundbook.domain.errors import PersistenceError
from fundbook.domain.replay import BalanceReplayEngine
from fundbook.utils.amount_parser import parse_amount
from fundbook.cli.error_handling import handle_domain_error


@click.command("replay")
@click.option("--opening-cash", help="Cash balance before the first record (e.g., 15000)")
@click.option("--opening-bank", help="Bank balance before the first record (e.g., 50000)")
@click.option(
    "--reuse-opening",
    is_flag=True,
    help="Use the opening balances recorded by the previous replay",
)
@click.option("--dry-run", is_flag=True, help="Compute balances without writing anything")
@click.pass_context
def replay_balances(
    ctx,
    opening_cash: str | None,
    opening_bank: str | None,
    reuse_opening: bool,
    dry_run: bool,
):
    """Rebuild cash and bank running balances from the full history.

    Every transaction and cash movement is replayed in date order from the
    given opening balances. Each record that moves a balance is stamped with
    the balance after it, an audit entry is written per balance change, and
    a final snapshot is recorded per account.

    Examples:
        fundbook replay --opening-cash 15000 --opening-bank 50000
        fundbook replay --reuse-opening
        fundbook replay --opening-cash 15000 --opening-bank 50000 --dry-run
    """
    store = ctx.obj["store"]
    tenant = ctx.obj["tenant"]
    engine = BalanceReplayEngine(store)

    if reuse_opening:
        if opening_cash is not None or opening_bank is not None:
            click.echo("Error: --reuse-opening cannot be combined with explicit opening balances", err=True)
            ctx.exit(1)
        previous = engine.last_opening_balances(tenant)
        if previous is None:
            click.echo("Error: No previous replay recorded its opening balances", err=True)
            ctx.exit(1)
        cash, bank = previous
    else:
        if opening_cash is None or opening_bank is None:
            click.echo("Error: --opening-cash and --opening-bank are required", err=True)
            ctx.exit(1)
        try:
            cash, bank = parse_amount(opening_cash), parse_amount(opening_bank)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    click.echo(f"Opening balances: cash {cash:.2f}, bank {bank:.2f}")

    if dry_run:
        plan = engine.plan(tenant, cash, bank)
        click.echo(f"Records that would be updated: {len(plan.stamped_items)}")
        if plan.skipped_count:
            click.echo(f"Unreadable records skipped: {plan.skipped_count}")
        click.echo(f"Final cash balance: {plan.final_cash_balance:.2f}")
        click.echo(f"Final bank balance: {plan.final_bank_balance:.2f}")
        click.echo("Dry run: nothing was written.")
        return

    try:
        summary = engine.run_balance_replay(tenant, cash, bank)
    except PersistenceError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Records updated: {summary.updated_count}/{summary.attempted_count}")
    if summary.failed_count:
        click.echo(f"Records that could not be updated: {summary.failed_count}")
    if summary.skipped_count:
        click.echo(f"Unreadable records skipped: {summary.skipped_count}")
    click.echo(f"Audit entries written: {summary.audit_count}")
    click.echo(f"Final cash balance: {summary.final_cash_balance:.2f}")
    click.echo(f"Final bank balance: {summary.final_bank_balance:.2f}")
    if summary.failed_count:
        ctx.exit(1)


@click.command("cleanup-legacy")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def cleanup_legacy(ctx, yes: bool):
    """Delete legacy cash-expense movements.

    Cash expenses belong in the transaction log; copies of them in the
    movement log double count cash outflows. Run 'replay' afterwards to
    rebuild the balances.
    """
    if not yes:
        click.confirm("Delete all cash-expense movements?", abort=True)

    try:
        summary = LegacyCleanup(ctx.obj["store"]).cleanup_legacy_cash_expenses(ctx.obj["tenant"])
    except PersistenceError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Movements checked: {summary.checked}")
    click.echo(f"Legacy cash-expense movements removed: {summary.removed}")
    if summary.failed:
        click.echo(f"Movements that could not be removed: {summary.failed}")
        ctx.exit(1)


def register_commands(cli):
    """Register replay commands with main CLI."""
    cli.add_command(replay_balances)
    cli.add_command(cleanup_legacy)
