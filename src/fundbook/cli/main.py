"""Main CLI entry point."""

import click
from fundbook.database.factories import create_sqlite_store
from fundbook.logging_config import configure_logging

# Import and register all commands at module level
from fundbook.cli.commands import (
    account,
    analyze,
    chart,
    journal,
    record,
    replay,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FUNDBOOK_DB_PATH environment variable)",
    envvar="FUNDBOOK_DB_PATH",
)
@click.option(
    "--tenant",
    default="default",
    show_default=True,
    envvar="FUNDBOOK_TENANT",
    help="Tenant whose ledger to operate on",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress at INFO level")
@click.pass_context
def cli(ctx, db_path: str | None, tenant: str, verbose: bool):
    """Fundbook - Ledger reconciliation for nonprofits.

    Maintain a chart of accounts, record transactions and cash movements,
    and rebuild cash and bank running balances from the full history.
    """
    ctx.ensure_object(dict)
    configure_logging("INFO" if verbose else None)

    # Open the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.obj["tenant"] = tenant
        ctx.call_on_close(store.disconnect)


# Register all commands
chart.register_commands(cli)
account.register_commands(cli)
record.register_commands(cli)
journal.register_commands(cli)
replay.register_commands(cli)
analyze.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
