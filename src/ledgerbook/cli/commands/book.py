"""Book view commands."""

import click

from ledgerbook.cli.date_filters import date_range_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.books import BOOK_ACCOUNT_TYPES, BOOK_TITLES
from ledgerbook.domain.entities import BookCategory
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.statements import StatementService


@click.group()
def book_group():
    """View books of original entry."""
    pass


@book_group.command("view")
@click.argument("book")
@date_range_options
@click.pass_context
def view_book(ctx, book: str, start_date: str | None, end_date: str | None, **kwargs):
    """Show the rows filed in BOOK, newest first.

    BOOK is a journal book (ledger, cash, bank, sales, purchase, payable,
    receivable, inventory, payroll) or an entry book category such as
    sales_book or cash_book.
    """
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    service = StatementService(ctx.obj["db"], ctx.obj["owner"])
    try:
        rows = service.book(book, start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if book in BOOK_ACCOUNT_TYPES:
        title = BOOK_TITLES[book]
    else:
        title = BookCategory(book).value.replace("_", " ").title()
    click.echo(f"\n{title}")

    if not rows:
        click.echo("No entries found.")
        return

    click.echo("-" * 100)
    if book in BOOK_ACCOUNT_TYPES:
        click.echo(f"{'Date':<12} {'Entry':<7} {'Account':<24} {'Debit':>14} {'Credit':>14}  {'Description':<24}")
        click.echo("-" * 100)
        for row in rows:
            debit = f"{row.amount:,.2f}" if row.entry_type.value == "debit" else ""
            credit = f"{row.amount:,.2f}" if row.entry_type.value == "credit" else ""
            click.echo(
                f"{str(row.entry_date):<12} {row.journal_entry_id:<7} {row.account_name[:24]:<24} "
                f"{debit:>14} {credit:>14}  {row.description[:24]:<24}"
            )
    else:
        click.echo(f"{'Date':<12} {'Entry':<7} {'Type':<18} {'Party':<20} {'Total':>14}  {'Description':<22}")
        click.echo("-" * 100)
        for row in rows:
            click.echo(
                f"{str(row.transaction_date):<12} {row.id:<7} {row.transaction_type.value:<18} "
                f"{(row.party_name or '')[:20]:<20} {row.total_amount:>14,.2f}  {(row.description or '')[:22]:<22}"
            )


def register_commands(cli: click.Group) -> None:
    """Register book commands with main CLI."""
    cli.add_command(book_group, name="book")
