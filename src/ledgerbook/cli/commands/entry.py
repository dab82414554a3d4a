"""Flat entry commands."""

import click

from ledgerbook.cli.date_filters import date_range_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error, parse_amount_option
from ledgerbook.domain.entities import (
    BookCategory,
    PartyType,
    PaymentMode,
    PaymentType,
    TransactionType,
)
from ledgerbook.domain.entry import EntryService
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.date_parser import parse_date

AMOUNT_OPTIONS = (
    "quantity",
    "unit_price",
    "discount",
    "tax_rate",
    "amount_paid",
    "gross_pay",
    "allowances",
    "deductions",
)


def _choices(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


@click.group()
def entry_group():
    """Record and post flat transaction entries."""
    pass


@entry_group.command("add")
@click.option("--type", "transaction_type", required=True, type=_choices(TransactionType), help="Transaction type")
@click.option("--date", "date_str", help="Transaction date (YYYY-MM-DD or relative like 'today'); defaults to today")
@click.option("--description", help="Description")
@click.option("--reference", help="Reference number")
@click.option("--party", help="Customer, supplier or employee name")
@click.option("--party-type", type=_choices(PartyType), help="Party type")
@click.option("--party-contact", help="Party contact details")
@click.option("--category", help="Free-text category")
@click.option("--product", help="Product or service name")
@click.option("--quantity", help="Quantity")
@click.option("--unit-price", help="Unit price")
@click.option("--discount", help="Discount amount")
@click.option("--tax-rate", help="Tax rate in percent")
@click.option("--payment-type", type=_choices(PaymentType), help="Payment type")
@click.option("--payment-mode", type=_choices(PaymentMode), help="Payment mode")
@click.option("--payment-reference", help="Payment reference")
@click.option("--bank-name", help="Bank name")
@click.option("--bank-account", help="Bank account")
@click.option("--amount-paid", help="Amount paid up front")
@click.option("--due-date", help="Due date for the balance")
@click.option("--employee-id", help="Employee ID (payroll)")
@click.option("--gross-pay", help="Gross pay (payroll)")
@click.option("--allowances", help="Allowances (payroll)")
@click.option("--deductions", help="Deductions (payroll)")
@click.option("--debit-account", help="Account to debit when posting (overrides the default mapping)")
@click.option("--credit-account", help="Account to credit when posting (overrides the default mapping)")
@click.option("--ledger-category", help="Ledger category")
@click.option("--notes", help="Notes")
@click.option("--post", is_flag=True, help="Post the entry into the journal right away")
@click.pass_context
def add_entry(ctx, transaction_type: str, date_str: str | None, due_date: str | None, post: bool, **options):
    """Record a flat entry.

    Totals are computed from quantity, unit price, discount and tax rate, or
    from gross pay, allowances and deductions for payroll.

    Examples:
        ledgerbook entry add --type cash_sale --quantity 10 --unit-price 50 --tax-rate 7.5
        ledgerbook entry add --type payroll --gross-pay 3000 --allowances 200 --deductions 150 --post
    """
    db = ctx.obj["db"]
    service = EntryService(db, ctx.obj["owner"])

    txn_date = None
    if date_str:
        try:
            txn_date = parse_date(date_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    due = None
    if due_date:
        try:
            due = parse_date(due_date)
        except ValueError as e:
            click.echo(f"Error: Invalid due date: {e}", err=True)
            ctx.exit(1)

    amounts = {
        name: parse_amount_option(ctx, name.replace("_", " "), options.pop(name)) for name in AMOUNT_OPTIONS
    }

    try:
        entry_id = service.create_entry(
            transaction_type=transaction_type,
            transaction_date=txn_date,
            description=options["description"],
            reference_number=options["reference"],
            party_name=options["party"],
            party_type=options["party_type"],
            party_contact=options["party_contact"],
            category=options["category"],
            product_service_name=options["product"],
            payment_type=options["payment_type"],
            payment_mode=options["payment_mode"],
            payment_reference=options["payment_reference"],
            bank_name=options["bank_name"],
            bank_account=options["bank_account"],
            due_date=due,
            employee_id=options["employee_id"],
            debit_account=options["debit_account"],
            credit_account=options["credit_account"],
            ledger_category=options["ledger_category"],
            notes=options["notes"],
            post=post,
            **amounts,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    created = service.get_entry(entry_id)
    click.echo(
        f"Created entry {entry_id}: {created.transaction_type.label} "
        f"{created.total_amount:,.2f} in {created.book_category.value}"
    )
    if created.is_posted:
        click.echo(f"Posted as journal entry {created.journal_entry_id}")


@entry_group.command("list")
@date_range_options
@click.option("--book", type=_choices(BookCategory), help="Only entries filed in this book")
@click.option("--type", "transaction_type", type=_choices(TransactionType), help="Only entries of this type")
@click.pass_context
def list_entries(ctx, start_date: str | None, end_date: str | None, book: str | None, transaction_type: str | None, **kwargs):
    """List flat entries, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    service = EntryService(ctx.obj["db"], ctx.obj["owner"])
    entries = service.list_entries(start_date=start, end_date=end, book_category=book, transaction_type=transaction_type)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(entries)} entry(ies):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Type':<18} {'Total':>14}  {'Posted':<8} {'Description':<36}")
    click.echo("-" * 100)
    for item in entries:
        posted = str(item.journal_entry_id) if item.is_posted else "-"
        description = (item.description or "")[:36]
        click.echo(
            f"{item.id:<6} {str(item.transaction_date):<12} {item.transaction_type.value:<18} "
            f"{item.total_amount:>14,.2f}  {posted:<8} {description:<36}"
        )
    click.echo("-" * 100)
    total = sum(item.total_amount for item in entries)
    click.echo(f"{'TOTAL':<6} {'':<12} {'':<18} {total:>14,.2f}")


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show every field of an entry."""
    service = EntryService(ctx.obj["db"], ctx.obj["owner"])
    item = service.get_entry(entry_id)
    if item is None:
        click.echo(f"Error: Entry {entry_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Entry ID: {item.id}")
    click.echo(f"  Date: {item.transaction_date}")
    click.echo(f"  Type: {item.transaction_type.label}")
    click.echo(f"  Book: {item.book_category.value}")
    click.echo(f"  Total: {item.total_amount:,.2f}")
    optional_fields = [
        ("Description", item.description),
        ("Reference", item.reference_number),
        ("Party", item.party_name),
        ("Party type", item.party_type.value if item.party_type else None),
        ("Product/service", item.product_service_name),
        ("Quantity", item.quantity),
        ("Unit price", item.unit_price),
        ("Discount", item.discount or None),
        ("Tax rate", item.tax_rate),
        ("Amount before tax", item.amount_before_tax),
        ("Tax", item.tax_amount),
        ("Amount paid", item.amount_paid),
        ("Balance due", item.balance_due or None),
        ("Due date", item.due_date),
        ("Gross pay", item.gross_pay),
        ("Allowances", item.allowances),
        ("Deductions", item.deductions),
        ("Net pay", item.net_pay),
        ("Debit account", item.debit_account),
        ("Credit account", item.credit_account),
        ("Notes", item.notes),
    ]
    for label, value in optional_fields:
        if value is not None:
            click.echo(f"  {label}: {value}")
    click.echo(f"  Journal entry: {item.journal_entry_id if item.is_posted else 'not posted'}")


@entry_group.command("post")
@click.argument("entry_id", type=int)
@click.pass_context
def post_entry(ctx, entry_id: int):
    """Post an entry into the journal as a balanced debit/credit pair.

    Uses the entry's own debit/credit accounts, or the default mapping for its
    transaction type (see 'ledgerbook account mappings').
    """
    service = EntryService(ctx.obj["db"], ctx.obj["owner"])
    try:
        journal_entry_id = service.post_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted entry {entry_id} as journal entry {journal_entry_id}")


def register_commands(cli: click.Group) -> None:
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
