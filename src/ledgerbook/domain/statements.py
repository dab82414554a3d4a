"""Financial statement aggregation.

Every statement is a pure function over the complete row set it is given:
one linear pass that classifies each row into a bucket and sums per bucket.
StatementService only fetches the rows for an owner and hands them over, so
running any statement twice on unchanged data gives identical output.
"""

from typing import Optional, Iterable
from datetime import date
from decimal import Decimal

from ledgerbook.database.base import Database
from ledgerbook.domain.accounts import Classifier, build_classifier
from ledgerbook.domain.books import BOOK_ACCOUNT_TYPES, COST_TYPES, SALES_TYPES
from ledgerbook.domain.entities import (
    AccountClass,
    BalanceSheet,
    BookCategory,
    BookRow,
    DashboardMetrics,
    Entry,
    EntrySide,
    FinancialSummary,
    JournalEntry,
    JournalLine,
    LineAccountType,
    ProfitAndLoss,
    ProfitTarget,
    RETAINED_EARNINGS_LINE,
    StatementLine,
    TargetProgress,
    TrialBalance,
    TrialBalanceRow,
)
from ledgerbook.domain.errors import ValidationError, unknown_choice
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.amount_parser import ZERO, to_decimal
from ledgerbook.utils.date_parser import month_key

logger = get_logger(__name__)

CLASS_ORDER = [
    AccountClass.ASSET,
    AccountClass.LIABILITY,
    AccountClass.EQUITY,
    AccountClass.INCOME,
    AccountClass.EXPENSE,
]

JOURNAL_REVENUE_TYPES = frozenset({LineAccountType.SALES})
JOURNAL_COST_TYPES = frozenset(
    {LineAccountType.PURCHASE, LineAccountType.PAYROLL, LineAccountType.ACCOUNTS_PAYABLE}
)


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, yielding 0 for a non-positive denominator."""
    if denominator <= 0:
        return ZERO
    return numerator / denominator


# Book filters
def filter_entries_by_book(entries: Iterable[Entry], book: BookCategory | str) -> list[Entry]:
    """Return the flat entries filed in a book, newest first.

    Raises:
        ValidationError: If book is not a known book category
    """
    try:
        category = BookCategory(book)
    except ValueError:
        raise ValidationError(unknown_choice("book", book, [c.value for c in BookCategory]))

    matching = [entry for entry in entries if entry.book_category == category]
    return sorted(matching, key=lambda e: (e.transaction_date, e.id), reverse=True)


def filter_lines_by_book(journal_entries: Iterable[JournalEntry], book: str) -> list[BookRow]:
    """Return the journal lines filed in a book, joined with their headers.

    The "ledger" book holds lines of type "other"; every other book holds the
    lines of its own account type. Rows are sorted by entry date, newest first.

    Raises:
        ValidationError: If book is not a known journal book
    """
    if book not in BOOK_ACCOUNT_TYPES:
        raise ValidationError(unknown_choice("book", book, list(BOOK_ACCOUNT_TYPES)))
    account_type = BOOK_ACCOUNT_TYPES[book]

    rows = []
    for journal_entry in journal_entries:
        for line in journal_entry.lines:
            if line.account_type != account_type:
                continue
            rows.append(
                BookRow(
                    line_id=line.id,
                    journal_entry_id=journal_entry.id,
                    entry_date=journal_entry.entry_date,
                    description=journal_entry.description,
                    account_name=line.account_name,
                    entry_type=line.entry_type,
                    amount=to_decimal(line.amount),
                    reference_number=journal_entry.reference_number,
                )
            )
    return sorted(rows, key=lambda r: (r.entry_date, r.journal_entry_id, r.line_id), reverse=True)


# Dashboard
def dashboard_metrics_from_entries(entries: Iterable[Entry]) -> DashboardMetrics:
    """Revenue from sales entries, cost from purchase, expense and payroll entries."""
    revenue = ZERO
    cost = ZERO
    for entry in entries:
        amount = to_decimal(entry.total_amount)
        if entry.transaction_type in SALES_TYPES:
            revenue += amount
        elif entry.transaction_type in COST_TYPES:
            cost += amount
    return DashboardMetrics(total_revenue=revenue, total_cost=cost, net_profit=revenue - cost)


def dashboard_metrics_from_journal(journal_entries: Iterable[JournalEntry]) -> DashboardMetrics:
    """Revenue from sales credits, cost from purchase, payroll and payable debits."""
    revenue = ZERO
    cost = ZERO
    for journal_entry in journal_entries:
        for line in journal_entry.lines:
            amount = to_decimal(line.amount)
            if line.account_type in JOURNAL_REVENUE_TYPES and line.entry_type == EntrySide.CREDIT:
                revenue += amount
            elif line.account_type in JOURNAL_COST_TYPES and line.entry_type == EntrySide.DEBIT:
                cost += amount
    return DashboardMetrics(total_revenue=revenue, total_cost=cost, net_profit=revenue - cost)


# Trial balance and statements derived from it
def trial_balance(journal_entries: Iterable[JournalEntry], classify: Classifier) -> TrialBalance:
    """Roll journal lines up per (account class, account name).

    Args:
        journal_entries: Journal entries with their lines
        classify: Maps a line to its account class, or None if unknown

    Returns:
        TrialBalance with one row per account, ordered by class then name,
        and the lines that could not be classified
    """
    totals: dict[tuple[AccountClass, str], list[Decimal]] = {}
    unclassified: list[JournalLine] = []

    for journal_entry in journal_entries:
        for line in journal_entry.lines:
            account_class = classify(line)
            if account_class is None:
                unclassified.append(line)
                continue
            name = line.account_name or line.account_type.value.replace("_", " ").title()
            bucket = totals.setdefault((account_class, name), [ZERO, ZERO])
            amount = to_decimal(line.amount)
            if line.entry_type == EntrySide.DEBIT:
                bucket[0] += amount
            else:
                bucket[1] += amount

    rows = [
        TrialBalanceRow(account_name=name, account_class=account_class, total_debit=debit, total_credit=credit)
        for (account_class, name), (debit, credit) in totals.items()
    ]
    rows.sort(key=lambda r: (CLASS_ORDER.index(r.account_class), r.account_name))
    if unclassified:
        logger.warning("unclassified_lines", count=len(unclassified))
    return TrialBalance(rows=tuple(rows), unclassified=tuple(unclassified))


def _grouped(amounts: dict[str, Decimal]) -> tuple[StatementLine, ...]:
    return tuple(StatementLine(account_name=name, amount=amount) for name, amount in amounts.items() if amount != 0)


def profit_and_loss(
    trial_rows: Iterable[TrialBalanceRow],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ProfitAndLoss:
    """Build a profit and loss statement from trial balance rows.

    Income is credit-nature, so its amount is the negated net balance;
    expense amounts are the net balance as is. Accounts netting to zero are
    omitted.
    """
    revenue: dict[str, Decimal] = {}
    expenses: dict[str, Decimal] = {}
    for row in trial_rows:
        if row.account_class == AccountClass.INCOME:
            revenue[row.account_name] = revenue.get(row.account_name, ZERO) - row.net_balance
        elif row.account_class == AccountClass.EXPENSE:
            expenses[row.account_name] = expenses.get(row.account_name, ZERO) + row.net_balance

    revenue_lines = _grouped(revenue)
    expense_lines = _grouped(expenses)
    return ProfitAndLoss(
        revenue=revenue_lines,
        expenses=expense_lines,
        total_revenue=sum((line.amount for line in revenue_lines), ZERO),
        total_expenses=sum((line.amount for line in expense_lines), ZERO),
        start_date=start_date,
        end_date=end_date,
    )


def profit_and_loss_from_entries(
    entries: Iterable[Entry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ProfitAndLoss:
    """Build a profit and loss statement from flat entries, grouped by transaction type."""
    revenue: dict[str, Decimal] = {}
    expenses: dict[str, Decimal] = {}
    for entry in entries:
        amount = to_decimal(entry.total_amount)
        if entry.transaction_type in SALES_TYPES:
            bucket = revenue
        elif entry.transaction_type in COST_TYPES:
            bucket = expenses
        else:
            continue
        label = entry.transaction_type.label
        bucket[label] = bucket.get(label, ZERO) + amount

    revenue_lines = _grouped(revenue)
    expense_lines = _grouped(expenses)
    return ProfitAndLoss(
        revenue=revenue_lines,
        expenses=expense_lines,
        total_revenue=sum((line.amount for line in revenue_lines), ZERO),
        total_expenses=sum((line.amount for line in expense_lines), ZERO),
        start_date=start_date,
        end_date=end_date,
    )


def balance_sheet(trial_rows: Iterable[TrialBalanceRow], as_of: Optional[date] = None) -> BalanceSheet:
    """Build a balance sheet from trial balance rows.

    Assets show their net balance; liabilities and equity show it negated.
    Net income from the income and expense rows is added to equity as a
    retained earnings line when it is non-zero. The result reports its own
    difference rather than raising when it does not balance.
    """
    sections: dict[AccountClass, dict[str, Decimal]] = {
        AccountClass.ASSET: {},
        AccountClass.LIABILITY: {},
        AccountClass.EQUITY: {},
    }
    income_total = ZERO
    expense_total = ZERO

    for row in trial_rows:
        if row.account_class == AccountClass.INCOME:
            income_total -= row.net_balance
        elif row.account_class == AccountClass.EXPENSE:
            expense_total += row.net_balance
        else:
            amount = row.net_balance if row.account_class.is_debit_nature else -row.net_balance
            section = sections[row.account_class]
            section[row.account_name] = section.get(row.account_name, ZERO) + amount

    assets = _grouped(sections[AccountClass.ASSET])
    liabilities = _grouped(sections[AccountClass.LIABILITY])
    equity = list(_grouped(sections[AccountClass.EQUITY]))

    net_income = income_total - expense_total
    if net_income != 0:
        equity.append(StatementLine(account_name=RETAINED_EARNINGS_LINE, amount=net_income))

    return BalanceSheet(
        assets=assets,
        liabilities=liabilities,
        equity=tuple(equity),
        total_assets=sum((line.amount for line in assets), ZERO),
        total_liabilities=sum((line.amount for line in liabilities), ZERO),
        total_equity=sum((line.amount for line in equity), ZERO),
        net_income=net_income,
        as_of=as_of,
    )


def financial_summary(journal_entries: Iterable[JournalEntry]) -> FinancialSummary:
    """Compute the income, balance and ratio metrics used for risk analysis.

    Metrics are read straight off line account types. Margins and returns
    are percentages; any ratio with a non-positive denominator is 0.
    """
    count = 0
    revenue = ZERO
    total_expenses = ZERO
    cogs = ZERO
    opex = ZERO
    cash = ZERO
    bank = ZERO
    total_assets = ZERO
    total_liabilities = ZERO
    inventory = ZERO
    receivables = ZERO
    payables = ZERO
    monthly: dict[str, dict[str, Decimal]] = {}

    for journal_entry in journal_entries:
        count += 1
        month = monthly.setdefault(
            month_key(journal_entry.entry_date), {"revenue": ZERO, "expenses": ZERO}
        )
        for line in journal_entry.lines:
            amount = to_decimal(line.amount)
            is_debit = line.entry_type == EntrySide.DEBIT
            signed = amount if is_debit else -amount
            account_type = line.account_type

            if account_type == LineAccountType.SALES and not is_debit:
                revenue += amount
                month["revenue"] += amount
            if account_type in JOURNAL_COST_TYPES and is_debit:
                total_expenses += amount
                month["expenses"] += amount
            if account_type == LineAccountType.PURCHASE and is_debit:
                cogs += amount
            if account_type == LineAccountType.PAYROLL and is_debit:
                opex += amount

            if account_type == LineAccountType.CASH:
                cash += signed
            elif account_type == LineAccountType.BANK:
                bank += signed
                total_assets += signed
            elif account_type == LineAccountType.INVENTORY and is_debit:
                inventory += amount
                total_assets += amount
            elif account_type == LineAccountType.ACCOUNTS_RECEIVABLE and is_debit:
                receivables += amount
                total_assets += amount
            elif account_type == LineAccountType.ACCOUNTS_PAYABLE and not is_debit:
                payables += amount
                total_liabilities += amount

    net_profit = revenue - total_expenses
    gross_profit = revenue - cogs
    equity = total_assets - total_liabilities

    revenue_variance = ZERO
    expense_variance = ZERO
    months = sorted(monthly)
    if len(months) >= 2:
        current, previous = monthly[months[-1]], monthly[months[-2]]
        revenue_variance = current["revenue"] - previous["revenue"]
        expense_variance = current["expenses"] - previous["expenses"]

    operating_cash_flow = net_profit + (payables - receivables)

    return FinancialSummary(
        total_entries=count,
        total_revenue=revenue,
        cost_of_goods_sold=cogs,
        gross_profit=gross_profit,
        operating_expenses=opex,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=_ratio(net_profit * 100, revenue),
        gross_profit_margin=_ratio(gross_profit * 100, revenue),
        operating_profit_margin=_ratio((gross_profit - opex) * 100, revenue),
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        equity=equity,
        cash_balance=cash,
        bank_balance=bank,
        inventory=inventory,
        accounts_receivable=receivables,
        accounts_payable=payables,
        working_capital=equity,
        current_ratio=_ratio(total_assets, total_liabilities),
        quick_ratio=_ratio(total_assets - inventory, total_liabilities),
        debt_to_equity=_ratio(total_liabilities, equity),
        roi=_ratio(net_profit * 100, total_assets),
        roe=_ratio(net_profit * 100, equity),
        operating_cash_flow=operating_cash_flow,
        cash_flow_to_debt_ratio=_ratio(operating_cash_flow, total_liabilities),
        revenue_variance=revenue_variance,
        expense_variance=expense_variance,
        monthly={key: dict(values) for key, values in sorted(monthly.items())},
    )


def target_progress(target: ProfitTarget, net_profit: Decimal) -> TargetProgress:
    return TargetProgress(
        target_month=target.target_month,
        target_year=target.target_year,
        monthly_target=to_decimal(target.monthly_target),
        actual=net_profit,
    )


class StatementService:
    """Service that fetches an owner's rows and derives statements from them."""

    def __init__(self, db: Database, owner: str):
        """Initialize statement service.

        Args:
            db: Database instance
            owner: Identifier of the user whose books are reported on
        """
        self.db = db
        self.owner = owner

    def _journal(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[JournalEntry]:
        return self.db.list_journal_entries(self.owner, start_date=start_date, end_date=end_date)

    def _entries(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[Entry]:
        return self.db.list_entries(self.owner, start_date=start_date, end_date=end_date)

    def _classifier(self) -> Classifier:
        return build_classifier(self.db.list_accounts(self.owner))

    def book(
        self,
        book: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[BookRow] | list[Entry]:
        """List a book by journal book key (cash, sales, ...) or entry book category.

        Raises:
            ValidationError: If the identifier matches neither
        """
        if book in BOOK_ACCOUNT_TYPES:
            return filter_lines_by_book(self._journal(start_date, end_date), book)
        return filter_entries_by_book(self._entries(start_date, end_date), book)

    def dashboard(
        self,
        source: str = "journal",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> DashboardMetrics:
        """Dashboard totals from the journal (default) or from flat entries."""
        if source == "entries":
            return dashboard_metrics_from_entries(self._entries(start_date, end_date))
        return dashboard_metrics_from_journal(self._journal(start_date, end_date))

    def trial_balance(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> TrialBalance:
        return trial_balance(self._journal(start_date, end_date), self._classifier())

    def profit_and_loss(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        source: str = "journal",
    ) -> ProfitAndLoss:
        """Profit and loss for a period, from the trial balance or flat entries."""
        if source == "entries":
            return profit_and_loss_from_entries(self._entries(start_date, end_date), start_date, end_date)
        trial = self.trial_balance(start_date, end_date)
        return profit_and_loss(trial.rows, start_date, end_date)

    def balance_sheet(self, as_of: Optional[date] = None) -> tuple[BalanceSheet, TrialBalance]:
        """Balance sheet as of a date, with the trial balance it was built from."""
        trial = self.trial_balance(end_date=as_of)
        return balance_sheet(trial.rows, as_of=as_of), trial

    def financial_summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> FinancialSummary:
        return financial_summary(self._journal(start_date, end_date))
