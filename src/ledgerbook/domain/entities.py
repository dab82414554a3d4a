"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. Journal entries and their lines are the canonical record;
flat entries are source documents that can be posted into the journal.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Kinds of business transaction a flat entry can record."""

    CASH_SALE = "cash_sale"
    CREDIT_SALE = "credit_sale"
    CASH_PURCHASE = "cash_purchase"
    CREDIT_PURCHASE = "credit_purchase"
    SALES_RETURN = "sales_return"
    PURCHASE_RETURN = "purchase_return"
    CASH_RECEIPT = "cash_receipt"
    CASH_PAYMENT = "cash_payment"
    BANK_RECEIPT = "bank_receipt"
    BANK_PAYMENT = "bank_payment"
    PAYROLL = "payroll"
    EXPENSE = "expense"
    ASSET_PURCHASE = "asset_purchase"
    ASSET_DISPOSAL = "asset_disposal"
    LOAN_RECEIVED = "loan_received"
    LOAN_PAYMENT = "loan_payment"
    ADJUSTMENT = "adjustment"
    OPENING_BALANCE = "opening_balance"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class BookCategory(str, Enum):
    """Books of original entry a flat entry is filed under."""

    SALES_BOOK = "sales_book"
    PURCHASE_BOOK = "purchase_book"
    SALES_RETURN_BOOK = "sales_return_book"
    PURCHASE_RETURN_BOOK = "purchase_return_book"
    CASH_BOOK = "cash_book"
    BANK_BOOK = "bank_book"
    PAYROLL_BOOK = "payroll_book"
    GENERAL_JOURNAL = "general_journal"
    PETTY_CASH_BOOK = "petty_cash_book"
    BILLS_RECEIVABLE_BOOK = "bills_receivable_book"
    BILLS_PAYABLE_BOOK = "bills_payable_book"


class PartyType(str, Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    EMPLOYEE = "employee"
    OTHER = "other"


class PaymentType(str, Enum):
    CASH = "cash"
    BANK = "bank"
    CREDIT = "credit"


class PaymentMode(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    POS = "pos"
    ONLINE = "online"
    MOBILE_MONEY = "mobile_money"


class LineAccountType(str, Enum):
    """Account type tag carried by each journal line."""

    CASH = "cash"
    BANK = "bank"
    SALES = "sales"
    PURCHASE = "purchase"
    ACCOUNTS_PAYABLE = "accounts_payable"
    ACCOUNTS_RECEIVABLE = "accounts_receivable"
    INVENTORY = "inventory"
    PAYROLL = "payroll"
    OTHER = "other"


class EntrySide(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class AccountClass(str, Enum):
    """Chart-of-accounts type. Asset and expense accounts increase on debit."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def is_debit_nature(self) -> bool:
        return self in (AccountClass.ASSET, AccountClass.EXPENSE)


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FindingStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


@dataclass(frozen=True)
class Entry:
    """Flat transaction entry domain entity."""

    id: int
    owner: str
    transaction_date: date
    transaction_type: TransactionType
    book_category: BookCategory
    total_amount: Decimal
    description: Optional[str] = None
    reference_number: Optional[str] = None
    party_name: Optional[str] = None
    party_type: Optional[PartyType] = None
    party_contact: Optional[str] = None
    category: Optional[str] = None
    product_service_name: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    discount: Decimal = Decimal("0")
    tax_rate: Optional[Decimal] = None
    amount_before_tax: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    payment_type: Optional[PaymentType] = None
    payment_mode: Optional[PaymentMode] = None
    payment_reference: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    amount_paid: Optional[Decimal] = None
    balance_due: Decimal = Decimal("0")
    due_date: Optional[date] = None
    employee_id: Optional[str] = None
    gross_pay: Optional[Decimal] = None
    allowances: Optional[Decimal] = None
    deductions: Optional[Decimal] = None
    net_pay: Optional[Decimal] = None
    debit_account: Optional[str] = None
    credit_account: Optional[str] = None
    ledger_category: Optional[str] = None
    notes: Optional[str] = None
    journal_entry_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_posted(self) -> bool:
        return self.journal_entry_id is not None


@dataclass(frozen=True)
class JournalLine:
    """Single debit or credit line of a journal entry."""

    id: int
    journal_entry_id: int
    account_type: LineAccountType
    account_name: str
    entry_type: EntrySide
    amount: Decimal
    notes: Optional[str] = None
    account_id: Optional[int] = None


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with its lines."""

    id: int
    owner: str
    entry_date: date
    description: str
    reference_number: Optional[str] = None
    source_entry_id: Optional[int] = None
    created_at: Optional[datetime] = None
    lines: tuple[JournalLine, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.entry_type == EntrySide.DEBIT),
            Decimal("0"),
        )

    @property
    def total_credit(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.entry_type == EntrySide.CREDIT),
            Decimal("0"),
        )


@dataclass(frozen=True)
class PostingLine:
    """Unsaved journal line as supplied by a caller."""

    account_type: LineAccountType
    entry_type: EntrySide
    amount: Decimal
    account_name: str = ""
    notes: Optional[str] = None
    account_id: Optional[int] = None


@dataclass(frozen=True)
class PostingResult:
    """Outcome of posting a flat entry into the journal."""

    success: bool
    journal_entry_id: Optional[int] = None
    error: Optional[str] = None
    entry_id: Optional[int] = None


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts domain entity. owner is None for system defaults."""

    id: int
    owner: Optional[str]
    name: str
    type: AccountClass
    code: Optional[str] = None
    subtype: Optional[LineAccountType] = None
    parent_id: Optional[int] = None
    is_system_default: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TransactionMapping:
    """Default debit/credit account names for a transaction type."""

    id: int
    transaction_type: TransactionType
    debit_account_name: str
    credit_account_name: str
    is_system_default: bool = False


@dataclass(frozen=True)
class Product:
    id: int
    owner: str
    product_name: str
    unit_price: Decimal
    bulk_price: Decimal
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProfitTarget:
    id: int
    owner: str
    target_month: int
    target_year: int
    monthly_target: Decimal
    yearly_target: Decimal


@dataclass(frozen=True)
class RiskFinding:
    """Risk or data-quality finding attached to a user's books."""

    id: int
    owner: str
    finding_type: str
    severity: Severity
    title: str
    description: str
    status: FindingStatus = FindingStatus.OPEN
    recommendations: Optional[str] = None
    related_entry_id: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


@dataclass(frozen=True)
class EntryAmounts:
    """Computed monetary fields of a flat entry."""

    total_amount: Decimal
    amount_before_tax: Decimal = Decimal("0.00")
    tax_amount: Decimal = Decimal("0.00")
    balance_due: Decimal = Decimal("0.00")
    net_pay: Optional[Decimal] = None


@dataclass(frozen=True)
class BookRow:
    """Journal line joined with its entry header, as shown in a book."""

    line_id: int
    journal_entry_id: int
    entry_date: date
    description: str
    account_name: str
    entry_type: EntrySide
    amount: Decimal
    reference_number: Optional[str] = None


@dataclass(frozen=True)
class DashboardMetrics:
    total_revenue: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")


@dataclass(frozen=True)
class TrialBalanceRow:
    """Per-account rollup. net_balance is debit minus credit."""

    account_name: str
    account_class: AccountClass
    total_debit: Decimal
    total_credit: Decimal

    @property
    def net_balance(self) -> Decimal:
        return self.total_debit - self.total_credit


@dataclass(frozen=True)
class TrialBalance:
    rows: tuple[TrialBalanceRow, ...] = ()
    unclassified: tuple[JournalLine, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((row.total_debit for row in self.rows), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((row.total_credit for row in self.rows), Decimal("0"))


@dataclass(frozen=True)
class StatementLine:
    account_name: str
    amount: Decimal


@dataclass(frozen=True)
class ProfitAndLoss:
    revenue: tuple[StatementLine, ...] = ()
    expenses: tuple[StatementLine, ...] = ()
    total_revenue: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def net_profit(self) -> Decimal:
        return self.total_revenue - self.total_expenses


RETAINED_EARNINGS_LINE = "Net Income (Retained Earnings)"
BALANCE_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class BalanceSheet:
    assets: tuple[StatementLine, ...] = ()
    liabilities: tuple[StatementLine, ...] = ()
    equity: tuple[StatementLine, ...] = ()
    total_assets: Decimal = Decimal("0")
    total_liabilities: Decimal = Decimal("0")
    total_equity: Decimal = Decimal("0")
    net_income: Decimal = Decimal("0")
    as_of: Optional[date] = None

    @property
    def difference(self) -> Decimal:
        return self.total_assets - (self.total_liabilities + self.total_equity)

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) <= BALANCE_TOLERANCE


@dataclass(frozen=True)
class FinancialSummary:
    """Income statement, balance sheet and ratio metrics for risk analysis."""

    total_entries: int = 0
    total_revenue: Decimal = Decimal("0")
    cost_of_goods_sold: Decimal = Decimal("0")
    gross_profit: Decimal = Decimal("0")
    operating_expenses: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    profit_margin: Decimal = Decimal("0")
    gross_profit_margin: Decimal = Decimal("0")
    operating_profit_margin: Decimal = Decimal("0")
    total_assets: Decimal = Decimal("0")
    total_liabilities: Decimal = Decimal("0")
    equity: Decimal = Decimal("0")
    cash_balance: Decimal = Decimal("0")
    bank_balance: Decimal = Decimal("0")
    inventory: Decimal = Decimal("0")
    accounts_receivable: Decimal = Decimal("0")
    accounts_payable: Decimal = Decimal("0")
    working_capital: Decimal = Decimal("0")
    current_ratio: Decimal = Decimal("0")
    quick_ratio: Decimal = Decimal("0")
    debt_to_equity: Decimal = Decimal("0")
    roi: Decimal = Decimal("0")
    roe: Decimal = Decimal("0")
    operating_cash_flow: Decimal = Decimal("0")
    cash_flow_to_debt_ratio: Decimal = Decimal("0")
    revenue_variance: Decimal = Decimal("0")
    expense_variance: Decimal = Decimal("0")
    monthly: dict[str, dict[str, Decimal]] = field(default_factory=dict)


@dataclass(frozen=True)
class TargetProgress:
    target_month: int
    target_year: int
    monthly_target: Decimal
    actual: Decimal

    @property
    def remaining(self) -> Decimal:
        return max(self.monthly_target - self.actual, Decimal("0"))

    @property
    def percent_achieved(self) -> Decimal:
        if self.monthly_target <= 0:
            return Decimal("0")
        return (self.actual / self.monthly_target * 100).quantize(Decimal("0.01"))
