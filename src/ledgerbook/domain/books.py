"""Fixed classification tables for books and accounts."""

from typing import Optional

from ledgerbook.domain.entities import (
    AccountClass,
    BookCategory,
    LineAccountType,
    TransactionType,
)
from ledgerbook.domain.errors import ValidationError, unknown_choice

BOOK_CATEGORY_BY_TRANSACTION_TYPE: dict[TransactionType, BookCategory] = {
    TransactionType.CASH_SALE: BookCategory.SALES_BOOK,
    TransactionType.CREDIT_SALE: BookCategory.SALES_BOOK,
    TransactionType.CASH_PURCHASE: BookCategory.PURCHASE_BOOK,
    TransactionType.CREDIT_PURCHASE: BookCategory.PURCHASE_BOOK,
    TransactionType.SALES_RETURN: BookCategory.SALES_RETURN_BOOK,
    TransactionType.PURCHASE_RETURN: BookCategory.PURCHASE_RETURN_BOOK,
    TransactionType.CASH_RECEIPT: BookCategory.CASH_BOOK,
    TransactionType.CASH_PAYMENT: BookCategory.CASH_BOOK,
    TransactionType.BANK_RECEIPT: BookCategory.BANK_BOOK,
    TransactionType.BANK_PAYMENT: BookCategory.BANK_BOOK,
    TransactionType.PAYROLL: BookCategory.PAYROLL_BOOK,
    TransactionType.EXPENSE: BookCategory.PETTY_CASH_BOOK,
    TransactionType.ASSET_PURCHASE: BookCategory.GENERAL_JOURNAL,
    TransactionType.ASSET_DISPOSAL: BookCategory.GENERAL_JOURNAL,
    TransactionType.LOAN_RECEIVED: BookCategory.BILLS_PAYABLE_BOOK,
    TransactionType.LOAN_PAYMENT: BookCategory.BILLS_PAYABLE_BOOK,
    TransactionType.ADJUSTMENT: BookCategory.GENERAL_JOURNAL,
    TransactionType.OPENING_BALANCE: BookCategory.GENERAL_JOURNAL,
}

SALES_TYPES = frozenset({TransactionType.CASH_SALE, TransactionType.CREDIT_SALE})
COST_TYPES = frozenset(
    {
        TransactionType.CASH_PURCHASE,
        TransactionType.CREDIT_PURCHASE,
        TransactionType.EXPENSE,
        TransactionType.PAYROLL,
    }
)

# "other" has no fixed class and is resolved through the chart of accounts
LINE_ACCOUNT_CLASS: dict[LineAccountType, AccountClass] = {
    LineAccountType.CASH: AccountClass.ASSET,
    LineAccountType.BANK: AccountClass.ASSET,
    LineAccountType.ACCOUNTS_RECEIVABLE: AccountClass.ASSET,
    LineAccountType.INVENTORY: AccountClass.ASSET,
    LineAccountType.ACCOUNTS_PAYABLE: AccountClass.LIABILITY,
    LineAccountType.SALES: AccountClass.INCOME,
    LineAccountType.PURCHASE: AccountClass.EXPENSE,
    LineAccountType.PAYROLL: AccountClass.EXPENSE,
}

BOOK_ACCOUNT_TYPES: dict[str, LineAccountType] = {
    "ledger": LineAccountType.OTHER,
    "cash": LineAccountType.CASH,
    "bank": LineAccountType.BANK,
    "sales": LineAccountType.SALES,
    "purchase": LineAccountType.PURCHASE,
    "payable": LineAccountType.ACCOUNTS_PAYABLE,
    "receivable": LineAccountType.ACCOUNTS_RECEIVABLE,
    "inventory": LineAccountType.INVENTORY,
    "payroll": LineAccountType.PAYROLL,
}

BOOK_TITLES: dict[str, str] = {
    "ledger": "Ledger Books",
    "cash": "Cash Book",
    "bank": "Bank Book",
    "sales": "Sales Book",
    "purchase": "Purchase Book",
    "payable": "Accounts Payable",
    "receivable": "Accounts Receivable",
    "inventory": "Inventory Book",
    "payroll": "Payroll",
}

# (code, name, class, line subtype, parent code)
DEFAULT_CHART: list[tuple[str, str, AccountClass, Optional[LineAccountType], Optional[str]]] = [
    ("1000", "Assets", AccountClass.ASSET, None, None),
    ("1010", "Cash", AccountClass.ASSET, LineAccountType.CASH, "1000"),
    ("1020", "Bank", AccountClass.ASSET, LineAccountType.BANK, "1000"),
    ("1100", "Accounts Receivable", AccountClass.ASSET, LineAccountType.ACCOUNTS_RECEIVABLE, "1000"),
    ("1200", "Inventory", AccountClass.ASSET, LineAccountType.INVENTORY, "1000"),
    ("1500", "Fixed Assets", AccountClass.ASSET, None, "1000"),
    ("2000", "Liabilities", AccountClass.LIABILITY, None, None),
    ("2010", "Accounts Payable", AccountClass.LIABILITY, LineAccountType.ACCOUNTS_PAYABLE, "2000"),
    ("2100", "Loans Payable", AccountClass.LIABILITY, None, "2000"),
    ("3000", "Equity", AccountClass.EQUITY, None, None),
    ("3010", "Owner's Capital", AccountClass.EQUITY, None, "3000"),
    ("3900", "Opening Balance Equity", AccountClass.EQUITY, None, "3000"),
    ("4000", "Income", AccountClass.INCOME, None, None),
    ("4010", "Sales Revenue", AccountClass.INCOME, LineAccountType.SALES, "4000"),
    ("4020", "Sales Returns", AccountClass.INCOME, None, "4000"),
    ("4100", "Gain on Asset Disposal", AccountClass.INCOME, None, "4000"),
    ("5000", "Expenses", AccountClass.EXPENSE, None, None),
    ("5010", "Purchases", AccountClass.EXPENSE, LineAccountType.PURCHASE, "5000"),
    ("5020", "Purchase Returns", AccountClass.EXPENSE, None, "5000"),
    ("5100", "Salaries and Wages", AccountClass.EXPENSE, LineAccountType.PAYROLL, "5000"),
    ("5200", "General Expenses", AccountClass.EXPENSE, None, "5000"),
    ("5900", "Adjustments", AccountClass.EXPENSE, None, "5000"),
]

# transaction type -> (debit account, credit account)
DEFAULT_TRANSACTION_MAPPINGS: dict[TransactionType, tuple[str, str]] = {
    TransactionType.CASH_SALE: ("Cash", "Sales Revenue"),
    TransactionType.CREDIT_SALE: ("Accounts Receivable", "Sales Revenue"),
    TransactionType.CASH_PURCHASE: ("Purchases", "Cash"),
    TransactionType.CREDIT_PURCHASE: ("Purchases", "Accounts Payable"),
    TransactionType.SALES_RETURN: ("Sales Returns", "Cash"),
    TransactionType.PURCHASE_RETURN: ("Cash", "Purchase Returns"),
    TransactionType.CASH_RECEIPT: ("Cash", "Accounts Receivable"),
    TransactionType.CASH_PAYMENT: ("Accounts Payable", "Cash"),
    TransactionType.BANK_RECEIPT: ("Bank", "Accounts Receivable"),
    TransactionType.BANK_PAYMENT: ("Accounts Payable", "Bank"),
    TransactionType.PAYROLL: ("Salaries and Wages", "Bank"),
    TransactionType.EXPENSE: ("General Expenses", "Cash"),
    TransactionType.ASSET_PURCHASE: ("Fixed Assets", "Bank"),
    TransactionType.ASSET_DISPOSAL: ("Bank", "Fixed Assets"),
    TransactionType.LOAN_RECEIVED: ("Bank", "Loans Payable"),
    TransactionType.LOAN_PAYMENT: ("Loans Payable", "Bank"),
    TransactionType.ADJUSTMENT: ("Adjustments", "Owner's Capital"),
    TransactionType.OPENING_BALANCE: ("Cash", "Opening Balance Equity"),
}


def coerce_transaction_type(value) -> TransactionType:
    """Return the TransactionType for a value, or raise ValidationError."""
    if isinstance(value, TransactionType):
        return value
    if value is None or str(value).strip() == "":
        raise ValidationError("Transaction type is required")
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            unknown_choice("transaction type", value, [t.value for t in TransactionType])
        )


def book_category_for(transaction_type) -> BookCategory:
    """Resolve the book a transaction type is filed under."""
    return BOOK_CATEGORY_BY_TRANSACTION_TYPE[coerce_transaction_type(transaction_type)]
