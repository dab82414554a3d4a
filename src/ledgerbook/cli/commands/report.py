"""Financial report commands."""

import click

from ledgerbook.cli.date_filters import date_range_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.domain.statements import StatementService
from ledgerbook.utils.date_parser import parse_date

WIDTH = 80


def _money(amount) -> str:
    return f"{amount:,.2f}"


def _section(title: str, lines, total_label: str, total) -> None:
    click.echo(title)
    click.echo("*" * WIDTH)
    for line in lines:
        click.echo(f"    {line.account_name:<56} {_money(line.amount):>18}")
    click.echo("-" * WIDTH)
    click.echo(f"{total_label:<60} {_money(total):>18}")
    click.echo("=" * WIDTH)


@click.group()
def report_group():
    """Dashboards and financial statements."""
    pass


@report_group.command("dashboard")
@date_range_options
@click.option(
    "--source",
    type=click.Choice(["journal", "entries"]),
    default="journal",
    show_default=True,
    help="Derive totals from journal lines or from flat entries",
)
@click.pass_context
def dashboard(ctx, start_date: str | None, end_date: str | None, source: str, **kwargs):
    """Show total revenue, total cost and net profit."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    metrics = StatementService(ctx.obj["db"], ctx.obj["owner"]).dashboard(source, start_date=start, end_date=end)

    click.echo("\nDashboard")
    click.echo("-" * WIDTH)
    click.echo(f"{'Total Revenue':<60} {_money(metrics.total_revenue):>18}")
    click.echo(f"{'Total Cost':<60} {_money(metrics.total_cost):>18}")
    click.echo("-" * WIDTH)
    click.echo(f"{'Net Profit':<60} {_money(metrics.net_profit):>18}")


@report_group.command("trial-balance")
@date_range_options
@click.pass_context
def trial_balance(ctx, start_date: str | None, end_date: str | None, **kwargs):
    """Show debit and credit totals per account."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    trial = StatementService(ctx.obj["db"], ctx.obj["owner"]).trial_balance(start_date=start, end_date=end)

    if not trial.rows and not trial.unclassified:
        click.echo("No journal entries found.")
        return

    click.echo("\nTrial Balance")
    click.echo("-" * WIDTH)
    click.echo(f"{'Account':<30} {'Class':<10} {'Debit':>12} {'Credit':>12} {'Net':>12}")
    click.echo("-" * WIDTH)
    for row in trial.rows:
        click.echo(
            f"{row.account_name[:30]:<30} {row.account_class.value:<10} {_money(row.total_debit):>12} "
            f"{_money(row.total_credit):>12} {_money(row.net_balance):>12}"
        )
    click.echo("-" * WIDTH)
    click.echo(f"{'TOTAL':<30} {'':<10} {_money(trial.total_debit):>12} {_money(trial.total_credit):>12}")
    if trial.unclassified:
        click.echo(f"\nWarning: {len(trial.unclassified)} line(s) could not be classified.", err=True)


@report_group.command("profit-loss")
@date_range_options
@click.option(
    "--source",
    type=click.Choice(["journal", "entries"]),
    default="journal",
    show_default=True,
    help="Derive the statement from the journal or from flat entries",
)
@click.pass_context
def profit_loss(ctx, start_date: str | None, end_date: str | None, source: str, **kwargs):
    """Show the profit and loss statement."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    statement = StatementService(ctx.obj["db"], ctx.obj["owner"]).profit_and_loss(
        start_date=start, end_date=end, source=source
    )

    period = ""
    if start or end:
        period = f" ({start or '...'} to {end or '...'})"
    click.echo(f"\nProfit & Loss Statement{period}")
    click.echo("-" * WIDTH)
    _section("Revenue", statement.revenue, "Total Revenue", statement.total_revenue)
    click.echo()
    _section("Expenses", statement.expenses, "Total Expenses", statement.total_expenses)
    label = "Net Profit" if statement.net_profit >= 0 else "Net Loss"
    click.echo(f"{label:<60} {_money(statement.net_profit):>18}")


@report_group.command("balance-sheet")
@click.option("--as-of", help="Balance sheet date (defaults to all entries)")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show the balance sheet.

    Net income to date is shown under equity as retained earnings. If assets
    do not equal liabilities plus equity the difference is reported; run
    'ledgerbook risk check' to record it as a finding.
    """
    as_of_date = None
    if as_of:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    sheet, trial = StatementService(ctx.obj["db"], ctx.obj["owner"]).balance_sheet(as_of=as_of_date)

    click.echo(f"\nBalance Sheet{f' as of {as_of_date}' if as_of_date else ''}")
    click.echo("-" * WIDTH)
    _section("Assets", sheet.assets, "Total Assets", sheet.total_assets)
    click.echo()
    _section("Liabilities", sheet.liabilities, "Total Liabilities", sheet.total_liabilities)
    click.echo()
    _section("Equity", sheet.equity, "Total Equity", sheet.total_equity)
    total = sheet.total_liabilities + sheet.total_equity
    click.echo(f"{'Total Liabilities & Equity':<60} {_money(total):>18}")

    if sheet.is_balanced:
        click.echo("Balanced: yes")
    else:
        click.echo(f"Balanced: NO (difference {_money(sheet.difference)})")
    if trial.unclassified:
        click.echo(f"Warning: {len(trial.unclassified)} line(s) could not be classified.", err=True)


@report_group.command("summary")
@date_range_options
@click.pass_context
def summary(ctx, start_date: str | None, end_date: str | None, **kwargs):
    """Show financial metrics and ratios derived from the journal."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    metrics = StatementService(ctx.obj["db"], ctx.obj["owner"]).financial_summary(start_date=start, end_date=end)

    rows = [
        ("Journal entries", str(metrics.total_entries)),
        ("Total revenue", _money(metrics.total_revenue)),
        ("Cost of goods sold", _money(metrics.cost_of_goods_sold)),
        ("Gross profit", _money(metrics.gross_profit)),
        ("Operating expenses", _money(metrics.operating_expenses)),
        ("Total expenses", _money(metrics.total_expenses)),
        ("Net profit", _money(metrics.net_profit)),
        ("Profit margin %", _money(metrics.profit_margin)),
        ("Gross profit margin %", _money(metrics.gross_profit_margin)),
        ("Operating profit margin %", _money(metrics.operating_profit_margin)),
        ("Total assets", _money(metrics.total_assets)),
        ("Total liabilities", _money(metrics.total_liabilities)),
        ("Equity", _money(metrics.equity)),
        ("Cash balance", _money(metrics.cash_balance)),
        ("Bank balance", _money(metrics.bank_balance)),
        ("Inventory", _money(metrics.inventory)),
        ("Accounts receivable", _money(metrics.accounts_receivable)),
        ("Accounts payable", _money(metrics.accounts_payable)),
        ("Working capital", _money(metrics.working_capital)),
        ("Current ratio", _money(metrics.current_ratio)),
        ("Quick ratio", _money(metrics.quick_ratio)),
        ("Debt to equity", _money(metrics.debt_to_equity)),
        ("ROI %", _money(metrics.roi)),
        ("ROE %", _money(metrics.roe)),
        ("Operating cash flow", _money(metrics.operating_cash_flow)),
        ("Cash flow to debt", _money(metrics.cash_flow_to_debt_ratio)),
        ("Revenue variance (last month)", _money(metrics.revenue_variance)),
        ("Expense variance (last month)", _money(metrics.expense_variance)),
    ]
    click.echo("\nFinancial Summary")
    click.echo("-" * WIDTH)
    for label, value in rows:
        click.echo(f"{label:<60} {value:>18}")


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
