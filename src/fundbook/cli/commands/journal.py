"""Journal entry command."""

import click
from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.constants import TRANSACTIONS_COLLECTION
from fundbook.domain.errors import DomainError, NotFoundError, record_not_found
from fundbook.domain.journal import JournalService
from fundbook.domain.records import RecordService
from fundbook.cli.commands.record import echo_postings
from fundbook.cli.error_handling import handle_domain_error


@click.command("journal")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.pass_context
def show_journal(ctx, transaction_id: str):
    """Show the double-entry postings for a stored transaction."""
    store = ctx.obj["store"]
    tenant = ctx.obj["tenant"]
    directory = AccountDirectory(store)

    try:
        transaction = RecordService(store, directory).get_transaction(tenant, transaction_id)
        if transaction is None:
            raise NotFoundError(record_not_found(TRANSACTIONS_COLLECTION, transaction_id))
        postings = JournalService(directory).journal_for(tenant, transaction)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Transaction {transaction.id} ({transaction.type}, {transaction.date.isoformat()})")
    echo_postings(postings)


def register_commands(cli):
    """Register journal command with main CLI."""
    cli.add_command(show_journal)
