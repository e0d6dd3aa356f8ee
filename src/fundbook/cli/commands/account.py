"""Account management commands."""

import click
from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.constants import ACCOUNT_TYPES, DISPLAY_OPTIONS
from fundbook.domain.errors import DomainError
from fundbook.utils.amount_parser import parse_amount
from fundbook.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="ACCOUNT_CODE")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    default="expense",
    help="Account type (default: expense)",
)
@click.option(
    "--display-as",
    type=click.Choice(DISPLAY_OPTIONS, case_sensitive=False),
    default="hidden",
    help="How the account appears in category pickers (default: hidden)",
)
@click.option("--parent", "parent_code", help="Parent account code")
@click.option("--category", "category_name", help="Category label")
@click.option("--subcategory", "subcategory_name", help="Subcategory label")
@click.option("--legacy-category-id", help="Legacy category identifier (e.g., CAT-001)")
@click.option("--legacy-subcategory-id", help="Legacy subcategory identifier (e.g., SUB-003)")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    display_as: str,
    parent_code: str | None,
    category_name: str | None,
    subcategory_name: str | None,
    legacy_category_id: str | None,
    legacy_subcategory_id: str | None,
):
    """Create a new account.

    Examples:
        fundbook account create 5110 "Office Supplies" --display-as subcategory \\
            --parent 5100 --category Operations --subcategory Supplies
        fundbook account create 2000 "Accounts Payable" --type liability
    """
    directory = AccountDirectory(ctx.obj["store"])
    data = {
        "account_code": code,
        "account_name": name,
        "account_type": account_type.lower(),
        "display_as": display_as.lower(),
        "parent_code": parent_code,
        "level": 2 if parent_code else 1,
        "category_name": category_name,
        "subcategory_name": subcategory_name,
        "legacy_category_id": legacy_category_id,
        "legacy_subcategory_id": legacy_subcategory_id,
    }

    try:
        account_code = directory.create_account(ctx.obj["tenant"], data)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created account {account_code} '{name}'")


@account_group.command("update")
@click.argument("code", metavar="ACCOUNT_CODE")
@click.option("--name", "account_name", help="New account name")
@click.option("--category", "category_name", help="New category label")
@click.option("--subcategory", "subcategory_name", help="New subcategory label")
@click.option("--budget-monthly", help="Monthly budget amount")
@click.option("--budget-annual", help="Annual budget amount")
@click.pass_context
def update_account(
    ctx,
    code: str,
    account_name: str | None,
    category_name: str | None,
    subcategory_name: str | None,
    budget_monthly: str | None,
    budget_annual: str | None,
):
    """Update the editable fields of an account.

    The code, type and parent of an account cannot be changed.
    """
    directory = AccountDirectory(ctx.obj["store"])
    updates = {
        "account_name": account_name,
        "category_name": category_name,
        "subcategory_name": subcategory_name,
    }

    try:
        if budget_monthly is not None:
            updates["budget_monthly"] = parse_amount(budget_monthly)
        if budget_annual is not None:
            updates["budget_annual"] = parse_amount(budget_annual)
        directory.update_account(ctx.obj["tenant"], code, updates)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated account {code}")


@account_group.command("deactivate")
@click.argument("code", metavar="ACCOUNT_CODE")
@click.pass_context
def deactivate_account(ctx, code: str):
    """Deactivate an account. Accounts are never deleted."""
    directory = AccountDirectory(ctx.obj["store"])

    try:
        directory.deactivate_account(ctx.obj["tenant"], code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deactivated account {code}")


@account_group.command("resolve")
@click.argument("category", metavar="CATEGORY")
@click.argument("subcategory", metavar="SUBCATEGORY", required=False)
@click.option("--legacy", is_flag=True, help="Treat arguments as legacy CAT-/SUB- identifiers")
@click.pass_context
def resolve_account(ctx, category: str, subcategory: str | None, legacy: bool):
    """Resolve a category (and optional subcategory) to an account code.

    Examples:
        fundbook account resolve Operations
        fundbook account resolve Operations Supplies
        fundbook account resolve CAT-001 --legacy
    """
    directory = AccountDirectory(ctx.obj["store"])
    tenant = ctx.obj["tenant"]

    if legacy:
        code = directory.resolve_by_legacy_id(tenant, category, subcategory)
    else:
        code = directory.resolve_by_category(tenant, category, subcategory)

    if code is None:
        label = f"{category}/{subcategory}" if subcategory else category
        click.echo(f"No account found for '{label}'", err=True)
        ctx.exit(1)
    click.echo(code)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
