"""Chart of accounts seeding and category listing commands."""

import click
from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.errors import DomainError
from fundbook.cli.error_handling import handle_domain_error


@click.command("seed-chart")
@click.pass_context
def seed_chart(ctx):
    """Create the default chart of accounts.

    Accounts whose code already exists are left untouched, so the command
    is safe to run more than once.
    """
    directory = AccountDirectory(ctx.obj["store"])
    tenant = ctx.obj["tenant"]

    try:
        created = directory.seed_default_chart(tenant)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if created:
        click.echo(f"Created {created} account(s) for tenant '{tenant}'")
    else:
        click.echo(f"Chart of accounts for tenant '{tenant}' is already seeded")


@click.group()
def category_group():
    """Browse categories derived from the chart of accounts."""
    pass


@category_group.command("list")
@click.option("--include-inactive", is_flag=True, help="Also list deactivated categories")
@click.pass_context
def list_categories(ctx, include_inactive: bool):
    """List categories and their subcategories."""
    directory = AccountDirectory(ctx.obj["store"])

    categories = directory.list_categories_from_accounts(ctx.obj["tenant"])
    if not include_inactive:
        categories = [category for category in categories if category.active]
    if not categories:
        click.echo("No categories found. Run 'seed-chart' to create the default chart.")
        return

    click.echo("\nCategories:")
    for category in categories:
        status = "" if category.active else " [inactive]"
        click.echo(f"{category.code} {category.name} ({category.legacy_id}){status}")
        for sub in category.subcategories:
            click.echo(f"  {sub.name} ({sub.id})")


def register_commands(cli):
    """Register chart commands with main CLI."""
    cli.add_command(seed_chart)
    cli.add_command(category_group, name="category")
