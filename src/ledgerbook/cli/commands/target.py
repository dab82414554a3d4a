"""Profit target commands."""

from datetime import date

import click

from ledgerbook.cli.error_handling import handle_domain_error, parse_amount_option
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.target import ProfitTargetService


@click.group()
def target_group():
    """Set and track monthly profit targets."""
    pass


@target_group.command("set")
@click.option("--month", type=int, help="Month (1-12); defaults to the current month")
@click.option("--year", type=int, help="Year; defaults to the current year")
@click.option("--monthly", "monthly_target", required=True, help="Monthly net profit target")
@click.option("--yearly", "yearly_target", help="Yearly net profit target (defaults to 12x monthly)")
@click.pass_context
def set_target(ctx, month: int | None, year: int | None, monthly_target: str, yearly_target: str | None):
    """Set the profit target for a month, replacing any existing one."""
    today = date.today()
    month = today.month if month is None else month
    year = today.year if year is None else year
    monthly = parse_amount_option(ctx, "monthly target", monthly_target)
    yearly = parse_amount_option(ctx, "yearly target", yearly_target)

    service = ProfitTargetService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.set_target(month, year, monthly, yearly)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Set profit target for {year}-{month:02d}: {monthly:,.2f}")


@target_group.command("show")
@click.option("--month", type=int, help="Month (1-12); defaults to the current month")
@click.option("--year", type=int, help="Year; defaults to the current year")
@click.pass_context
def show_target(ctx, month: int | None, year: int | None):
    """Show progress towards a month's profit target."""
    today = date.today()
    month = today.month if month is None else month
    year = today.year if year is None else year

    service = ProfitTargetService(ctx.obj["db"], ctx.obj["owner"])
    try:
        progress = service.progress(month, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if progress is None:
        click.echo(f"No profit target set for {year}-{month:02d}.")
        return

    click.echo(f"Profit target for {year}-{month:02d}")
    click.echo(f"  Target:    {progress.monthly_target:>14,.2f}")
    click.echo(f"  Actual:    {progress.actual:>14,.2f}")
    click.echo(f"  Remaining: {progress.remaining:>14,.2f}")
    click.echo(f"  Achieved:  {progress.percent_achieved:>13}%")


def register_commands(cli: click.Group) -> None:
    """Register target commands with main CLI."""
    cli.add_command(target_group, name="target")
