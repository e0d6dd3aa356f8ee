"""Cash data analysis command."""

import click
from fundbook.domain.analysis import CashAnalysisService


@click.command("analyze")
@click.option("--top", default=5, show_default=True, help="Number of categories to show")
@click.pass_context
def analyze_cash(ctx, top: int):
    """Show an overview of transactions and cash movements."""
    report = CashAnalysisService(ctx.obj["store"]).analyze_cash_data(ctx.obj["tenant"], top_categories=top)

    click.echo(f"\nTransactions: {report.transaction_count} (total {report.transaction_total:.2f})")
    click.echo("-" * 60)
    for bucket in report.by_payment_method:
        click.echo(f"{bucket.name:<15} {bucket.count:>6} {bucket.total:>14.2f}")

    if report.top_categories:
        click.echo("\nTop categories:")
        for bucket in report.top_categories:
            click.echo(f"{bucket.name:<30} {bucket.count:>6} {bucket.total:>14.2f}")

    click.echo(f"\nCash movements: {report.movement_count}")
    click.echo("-" * 60)
    for total in report.by_movement_type:
        marker = " (legacy)" if total.is_legacy else ""
        click.echo(
            f"{total.type:<15} {total.count:>6}  in {total.total_in:>12.2f}  out {total.total_out:>12.2f}{marker}"
        )
    click.echo(
        f"Total in {report.movement_total_in:.2f}, total out {report.movement_total_out:.2f}, "
        f"net {report.movement_net:.2f}"
    )

    if report.legacy_cash_expense_count:
        click.echo(
            f"\n{report.legacy_cash_expense_count} legacy cash-expense movement(s) found. "
            "Run 'cleanup-legacy' to remove them."
        )


def register_commands(cli):
    """Register analyze command with main CLI."""
    cli.add_command(analyze_cash)
