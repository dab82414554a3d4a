"""Journal (double-entry) domain service."""

from typing import Optional, Any, Iterable, Mapping
from datetime import date
from decimal import Decimal

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    BALANCE_TOLERANCE,
    BookRow,
    EntrySide,
    JournalEntry as JournalEntryEntity,
    LineAccountType,
    PostingLine,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    UnbalancedEntryError,
    ValidationError,
    journal_entry_not_found,
    unbalanced_entry,
    unknown_choice,
)
from ledgerbook.domain.statements import filter_lines_by_book
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.amount_parser import ZERO, money

logger = get_logger(__name__)


def coerce_posting_line(line: PostingLine | Mapping[str, Any]) -> PostingLine:
    """Validate one caller-supplied line and return it as a PostingLine.

    Accepts either a PostingLine or a mapping with account_type, entry_type,
    amount and optional account_name, notes and account_id keys.

    Raises:
        ValidationError: If a field is missing or outside its closed set, or
            the amount is not positive
    """
    if isinstance(line, PostingLine):
        values = {
            "account_type": line.account_type,
            "entry_type": line.entry_type,
            "amount": line.amount,
            "account_name": line.account_name,
            "notes": line.notes,
            "account_id": line.account_id,
        }
    else:
        values = dict(line)

    try:
        account_type = LineAccountType(values.get("account_type"))
    except ValueError:
        raise ValidationError(
            unknown_choice("account type", values.get("account_type"), [t.value for t in LineAccountType])
        )
    try:
        entry_type = EntrySide(values.get("entry_type"))
    except ValueError:
        raise ValidationError(
            unknown_choice("entry type", values.get("entry_type"), [s.value for s in EntrySide])
        )

    amount = values.get("amount")
    if isinstance(amount, int) and not isinstance(amount, bool):
        amount = Decimal(amount)
    if not isinstance(amount, Decimal):
        raise ValidationError("Line amount must be a decimal number")
    amount = money(amount)
    if amount <= ZERO:
        raise ValidationError("Line amount must be greater than 0")

    account_name = (values.get("account_name") or "").strip()
    if account_type == LineAccountType.OTHER and not account_name:
        raise ValidationError("Lines of type 'other' must name an account")

    return PostingLine(
        account_type=account_type,
        entry_type=entry_type,
        amount=amount,
        account_name=account_name,
        notes=values.get("notes"),
        account_id=values.get("account_id"),
    )


def check_balanced(lines: Iterable[PostingLine]) -> tuple[Decimal, Decimal]:
    """Return (total debit, total credit), raising if they differ by more than a cent.

    Raises:
        UnbalancedEntryError: If debits and credits do not balance
    """
    total_debit = ZERO
    total_credit = ZERO
    for line in lines:
        if line.entry_type == EntrySide.DEBIT:
            total_debit += line.amount
        else:
            total_credit += line.amount
    if abs(total_debit - total_credit) > BALANCE_TOLERANCE:
        raise UnbalancedEntryError(unbalanced_entry(total_debit, total_credit))
    return total_debit, total_credit


class JournalService:
    """Service for posting and reading double-entry journal entries."""

    def __init__(self, db: Database, owner: str):
        """Initialize journal service.

        Args:
            db: Database instance
            owner: Identifier of the user whose books are being kept
        """
        self.db = db
        self.owner = owner

    def post_journal_entry(
        self,
        description: str,
        lines: Iterable[PostingLine | Mapping[str, Any]],
        entry_date: Optional[date] = None,
        reference_number: Optional[str] = None,
    ) -> int:
        """Validate and persist one balanced journal entry.

        The header and every line are written in one database transaction.

        Args:
            description: Required description of the entry
            lines: At least two debit/credit lines
            entry_date: Entry date (defaults to today)
            reference_number: Optional reference number

        Returns:
            Journal entry ID

        Raises:
            ValidationError: If the description is blank or a line is invalid
            UnbalancedEntryError: If debits and credits differ by more than 0.01
        """
        try:
            if description is None or not description.strip():
                raise ValidationError("Description is required")

            posting_lines = [coerce_posting_line(line) for line in lines]
            if len(posting_lines) < 2:
                raise ValidationError("A journal entry needs at least two lines")

            total_debit, total_credit = check_balanced(posting_lines)
        except ValidationError as e:
            logger.info("journal_entry_rejected", reason=str(e))
            raise

        journal_entry_id = self.db.create_journal_entry(
            self.owner,
            entry_date=entry_date or date.today(),
            description=description.strip(),
            lines=posting_lines,
            reference_number=reference_number,
        )
        logger.info(
            "journal_entry_posted",
            journal_entry_id=journal_entry_id,
            line_count=len(posting_lines),
            total_debit=str(total_debit),
            total_credit=str(total_credit),
        )
        return journal_entry_id

    def get_journal_entry(self, journal_entry_id: int) -> Optional[JournalEntryEntity]:
        """Get journal entry by ID.

        Returns:
            Journal entry entity with lines, or None if not found
        """
        return self.db.get_journal_entry(self.owner, journal_entry_id)

    def list_journal_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalEntryEntity]:
        """List journal entries with their lines, newest first."""
        return self.db.list_journal_entries(self.owner, start_date=start_date, end_date=end_date)

    def delete_journal_entry(self, journal_entry_id: int) -> None:
        """Delete a journal entry together with its lines.

        Raises:
            NotFoundError: If the journal entry doesn't exist
        """
        if self.db.get_journal_entry(self.owner, journal_entry_id) is None:
            raise NotFoundError(journal_entry_not_found(journal_entry_id))
        self.db.delete_journal_entry(self.owner, journal_entry_id)
        logger.info("journal_entry_deleted", journal_entry_id=journal_entry_id)

    def list_book(
        self,
        book: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[BookRow]:
        """List the journal lines filed in a book (cash, bank, sales, ...).

        Raises:
            ValidationError: If the book identifier is unknown
        """
        journal_entries = self.list_journal_entries(start_date=start_date, end_date=end_date)
        return filter_lines_by_book(journal_entries, book)
