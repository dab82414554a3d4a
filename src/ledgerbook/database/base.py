"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly; the domain package resolves its services lazily
from ledgerbook.domain.entities import (
    Account,
    AccountClass,
    BookCategory,
    Entry,
    FindingStatus,
    JournalEntry,
    LineAccountType,
    PostingLine,
    PostingResult,
    Product,
    ProfitTarget,
    RiskFinding,
    Severity,
    TransactionMapping,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for ledgerbook.

    Every owned entity is scoped by an owner identifier; reads never return
    rows belonging to another owner.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Flat entry operations
    @abstractmethod
    def create_entry(self, owner: str, fields: dict[str, Any]) -> int:
        """Insert one flat entry row. Returns entry ID."""
        pass

    @abstractmethod
    def get_entry(self, owner: str, entry_id: int) -> Optional[Entry]:
        """Get flat entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        owner: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        book_category: Optional[BookCategory] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Entry]:
        """List flat entries, newest first."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        owner: str,
        entry_date: date,
        description: str,
        lines: Sequence[PostingLine],
        reference_number: Optional[str] = None,
        source_entry_id: Optional[int] = None,
    ) -> int:
        """Insert a journal header and all of its lines in one transaction.

        Returns journal entry ID. Either everything is written or nothing is.
        """
        pass

    @abstractmethod
    def get_journal_entry(self, owner: str, journal_entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry with its lines."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        owner: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalEntry]:
        """List journal entries with their lines, newest first."""
        pass

    @abstractmethod
    def delete_journal_entry(self, owner: str, journal_entry_id: int) -> None:
        """Delete a journal entry and its lines."""
        pass

    # Chart of accounts operations
    @abstractmethod
    def create_account(
        self,
        owner: Optional[str],
        name: str,
        account_type: AccountClass,
        code: Optional[str] = None,
        subtype: Optional[LineAccountType] = None,
        parent_id: Optional[int] = None,
        is_system_default: bool = False,
    ) -> int:
        """Create an account. owner None creates a shared system account."""
        pass

    @abstractmethod
    def get_account(self, owner: str, account_id: int) -> Optional[Account]:
        """Get an account visible to owner (own or system default)."""
        pass

    @abstractmethod
    def get_account_by_name(self, owner: str, name: str) -> Optional[Account]:
        """Get account by name, preferring the owner's own account."""
        pass

    @abstractmethod
    def list_accounts(self, owner: str) -> list[Account]:
        """List the owner's accounts and system defaults, ordered by code."""
        pass

    @abstractmethod
    def update_account_type(self, account_id: int, account_type: AccountClass) -> None:
        """Set the class of an account."""
        pass

    @abstractmethod
    def create_transaction_mapping(
        self,
        transaction_type: TransactionType,
        debit_account_name: str,
        credit_account_name: str,
        is_system_default: bool = False,
    ) -> int:
        pass

    @abstractmethod
    def get_transaction_mapping(self, transaction_type: TransactionType) -> Optional[TransactionMapping]:
        pass

    @abstractmethod
    def list_transaction_mappings(self) -> list[TransactionMapping]:
        pass

    # Product operations
    @abstractmethod
    def create_product(self, owner: str, product_name: str, unit_price: Decimal, bulk_price: Decimal) -> int:
        pass

    @abstractmethod
    def list_products(self, owner: str) -> list[Product]:
        """List products, newest first."""
        pass

    @abstractmethod
    def delete_product(self, owner: str, product_id: int) -> None:
        pass

    # Profit target operations
    @abstractmethod
    def upsert_profit_target(
        self,
        owner: str,
        target_month: int,
        target_year: int,
        monthly_target: Decimal,
        yearly_target: Decimal,
    ) -> int:
        """Insert or update the target for (owner, month, year). Returns ID."""
        pass

    @abstractmethod
    def get_profit_target(self, owner: str, target_month: int, target_year: int) -> Optional[ProfitTarget]:
        pass

    # Risk finding operations
    @abstractmethod
    def create_risk_findings(self, owner: str, findings: Sequence[dict[str, Any]]) -> list[int]:
        """Insert findings in one transaction. Returns their IDs."""
        pass

    @abstractmethod
    def get_risk_finding(self, owner: str, finding_id: int) -> Optional[RiskFinding]:
        pass

    @abstractmethod
    def list_risk_findings(
        self,
        owner: str,
        status: Optional[FindingStatus] = None,
        severities: Optional[Sequence[Severity]] = None,
    ) -> list[RiskFinding]:
        """List findings, newest first."""
        pass

    @abstractmethod
    def update_risk_finding_status(
        self,
        owner: str,
        finding_id: int,
        status: FindingStatus,
        resolved_at: Optional[datetime] = None,
    ) -> None:
        pass

    # Server-side functions
    @abstractmethod
    def assign_book_category(self, transaction_type: TransactionType) -> BookCategory:
        """Pure lookup of the book a transaction type is filed under."""
        pass

    @abstractmethod
    def post_transaction(self, owner: str, entry_id: int) -> PostingResult:
        """Post a flat entry into the journal as one balanced entry."""
        pass

    @abstractmethod
    def create_and_post_entry(self, owner: str, fields: dict[str, Any]) -> PostingResult:
        """Insert a flat entry and post it atomically; nothing is stored on failure."""
        pass
