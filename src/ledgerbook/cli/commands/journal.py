"""Journal entry commands."""

import click

from ledgerbook.cli.date_filters import date_range_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.journal import JournalService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


def parse_line_spec(spec: str) -> dict:
    """Parse a TYPE:SIDE:AMOUNT[:NAME] line specification.

    Raises:
        ValueError: If the spec has the wrong shape or an unparsable amount
    """
    parts = spec.split(":", 3)
    if len(parts) < 3:
        raise ValueError(f"Invalid line '{spec}'. Expected TYPE:SIDE:AMOUNT[:NAME]")
    account_type, entry_type, amount = (part.strip() for part in parts[:3])
    return {
        "account_type": account_type.lower(),
        "entry_type": entry_type.lower(),
        "amount": parse_amount(amount),
        "account_name": parts[3].strip() if len(parts) == 4 else "",
    }


@click.group()
def journal_group():
    """Post and inspect double-entry journal entries."""
    pass


@journal_group.command("post")
@click.option("--description", required=True, help="Entry description")
@click.option(
    "--line",
    "line_specs",
    multiple=True,
    required=True,
    help="Line as TYPE:SIDE:AMOUNT[:NAME], e.g. cash:debit:500 (repeat for each line)",
)
@click.option("--date", "date_str", help="Entry date (YYYY-MM-DD or relative like 'today'); defaults to today")
@click.option("--reference", help="Reference number")
@click.pass_context
def post_journal_entry(ctx, description: str, line_specs: tuple[str, ...], date_str: str | None, reference: str | None):
    """Post a balanced journal entry.

    Debits and credits must agree to within 0.01, otherwise nothing is saved.

    Examples:
        ledgerbook journal post --description "Cash sale" --line cash:debit:500 --line sales:credit:500
        ledgerbook journal post --description "Rent" --line other:debit:1200:Rent --line bank:credit:1200
    """
    service = JournalService(ctx.obj["db"], ctx.obj["owner"])

    entry_date = None
    if date_str:
        try:
            entry_date = parse_date(date_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        lines = [parse_line_spec(spec) for spec in line_specs]
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        journal_entry_id = service.post_journal_entry(
            description=description,
            lines=lines,
            entry_date=entry_date,
            reference_number=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Posted journal entry {journal_entry_id} ({len(lines)} lines)")


@journal_group.command("list")
@date_range_options
@click.pass_context
def list_journal_entries(ctx, start_date: str | None, end_date: str | None, **kwargs):
    """List journal entries, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    service = JournalService(ctx.obj["db"], ctx.obj["owner"])
    journal_entries = service.list_journal_entries(start_date=start, end_date=end)

    if not journal_entries:
        click.echo("No journal entries found.")
        return

    click.echo(f"\nFound {len(journal_entries)} journal entry(ies):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Reference':<14} {'Debit':>14} {'Credit':>14}  {'Description':<34}")
    click.echo("-" * 100)
    for je in journal_entries:
        click.echo(
            f"{je.id:<6} {str(je.entry_date):<12} {(je.reference_number or ''):<14} "
            f"{je.total_debit:>14,.2f} {je.total_credit:>14,.2f}  {je.description[:34]:<34}"
        )


@journal_group.command("show")
@click.argument("journal_entry_id", type=int)
@click.pass_context
def show_journal_entry(ctx, journal_entry_id: int):
    """Show a journal entry with its lines."""
    service = JournalService(ctx.obj["db"], ctx.obj["owner"])
    je = service.get_journal_entry(journal_entry_id)
    if je is None:
        click.echo(f"Error: Journal entry {journal_entry_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Journal entry {je.id}: {je.description}")
    click.echo(f"  Date: {je.entry_date}")
    if je.reference_number:
        click.echo(f"  Reference: {je.reference_number}")
    if je.source_entry_id:
        click.echo(f"  Posted from entry: {je.source_entry_id}")
    click.echo("-" * 80)
    click.echo(f"{'Account type':<22} {'Account':<26} {'Debit':>14} {'Credit':>14}")
    click.echo("-" * 80)
    for line in je.lines:
        debit = f"{line.amount:,.2f}" if line.entry_type.value == "debit" else ""
        credit = f"{line.amount:,.2f}" if line.entry_type.value == "credit" else ""
        click.echo(f"{line.account_type.value:<22} {line.account_name[:26]:<26} {debit:>14} {credit:>14}")
    click.echo("-" * 80)
    click.echo(f"{'TOTAL':<22} {'':<26} {je.total_debit:>14,.2f} {je.total_credit:>14,.2f}")


@journal_group.command("delete")
@click.argument("journal_entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_journal_entry(ctx, journal_entry_id: int, yes: bool):
    """Delete a journal entry and its lines.

    Examples:
        ledgerbook journal delete 1
    """
    service = JournalService(ctx.obj["db"], ctx.obj["owner"])

    if service.get_journal_entry(journal_entry_id) is None:
        click.echo(f"Error: Journal entry {journal_entry_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete journal entry {journal_entry_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_journal_entry(journal_entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted journal entry {journal_entry_id}")


def register_commands(cli: click.Group) -> None:
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
