"""Chart of accounts commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.accounts import AccountService
from ledgerbook.domain.entities import AccountClass, LineAccountType
from ledgerbook.domain.errors import DomainError


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("init")
@click.pass_context
def init_accounts(ctx):
    """Seed the default chart of accounts and transaction mappings.

    Safe to run more than once; existing defaults are kept.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    created = service.initialize_defaults()
    if created:
        click.echo(f"Initialized default chart of accounts ({created} records created)")
    else:
        click.echo("Default chart of accounts already initialized")


@account_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice([c.value for c in AccountClass], case_sensitive=False),
    help="Account class",
)
@click.option("--code", help="Account code")
@click.option(
    "--subtype",
    type=click.Choice([t.value for t in LineAccountType], case_sensitive=False),
    help="Journal line account type this account maps to",
)
@click.option("--parent", "parent_code", help="Code of the parent account")
@click.pass_context
def create_account(ctx, name: str, account_type: str, code: str | None, subtype: str | None, parent_code: str | None):
    """Create an account.

    Examples:
        ledgerbook account create "Rent Expense" --type expense --code 5300 --parent 5000
    """
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    try:
        account_id = service.create_account(
            name=name, account_type=account_type, code=code, subtype=subtype, parent_code=parent_code
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("set-type")
@click.argument("name")
@click.argument("account_type", type=click.Choice([c.value for c in AccountClass], case_sensitive=False))
@click.pass_context
def set_account_type(ctx, name: str, account_type: str):
    """Change the class of one of your accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    try:
        account = service.set_account_type(name, account_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Account '{account.name}' is now {account.type.value}")


def _echo_tree(nodes, indent: int = 0) -> None:
    for node in nodes:
        code = node["code"] or ""
        click.echo(f"{'    ' * indent}{code:<6} {node['name']:<40} {node['type'].value}")
        _echo_tree(node["children"], indent + 1)


@account_group.command("list")
@click.option("--tree", is_flag=True, help="Show the account hierarchy")
@click.pass_context
def list_accounts(ctx, tree: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    accounts = service.list_accounts()

    if not accounts:
        click.echo("No accounts found. Run 'ledgerbook account init' to create the defaults.")
        return

    if tree:
        _echo_tree(service.get_account_tree())
        return

    click.echo(f"{'ID':<6} {'Code':<8} {'Name':<32} {'Class':<10} {'Subtype':<20} {'Default':<7}")
    click.echo("-" * 88)
    for acc in accounts:
        subtype = acc.subtype.value if acc.subtype else ""
        default = "yes" if acc.is_system_default else ""
        click.echo(
            f"{acc.id:<6} {(acc.code or ''):<8} {acc.name[:32]:<32} {acc.type.value:<10} {subtype:<20} {default:<7}"
        )


@account_group.command("mappings")
@click.pass_context
def list_mappings(ctx):
    """List the default debit/credit accounts per transaction type."""
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    mappings = service.list_transaction_mappings()

    if not mappings:
        click.echo("No mappings found. Run 'ledgerbook account init' to create the defaults.")
        return

    click.echo(f"{'Transaction type':<20} {'Debit':<28} {'Credit':<28}")
    click.echo("-" * 78)
    for mapping in mappings:
        click.echo(
            f"{mapping.transaction_type.value:<20} {mapping.debit_account_name:<28} {mapping.credit_account_name:<28}"
        )


def register_commands(cli: click.Group) -> None:
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
