"""Tests for posting balanced journal entries."""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from ledgerbook.domain.entities import EntrySide, LineAccountType, PostingLine
from ledgerbook.domain.errors import NotFoundError, UnbalancedEntryError, ValidationError
from ledgerbook.domain.journal import JournalService, check_balanced, coerce_posting_line


def _lines(*specs):
    return [
        {"account_type": spec[0], "entry_type": spec[1], "amount": Decimal(spec[2]), "account_name": spec[3] if len(spec) > 3 else ""}
        for spec in specs
    ]


def test_post_balanced_entry(journal_service):
    """Test that a balanced cash sale posts and reads back with its lines."""
    journal_entry_id = journal_service.post_journal_entry(
        "Cash sale",
        _lines(("cash", "debit", "500", "Cash"), ("sales", "credit", "500", "Sales Revenue")),
        entry_date=date(2024, 1, 10),
        reference_number="INV-1",
    )

    journal_entry = journal_service.get_journal_entry(journal_entry_id)
    assert journal_entry.description == "Cash sale"
    assert journal_entry.entry_date == date(2024, 1, 10)
    assert journal_entry.reference_number == "INV-1"
    assert len(journal_entry.lines) == 2
    assert journal_entry.total_debit == Decimal("500")
    assert journal_entry.total_credit == Decimal("500")
    assert journal_entry.lines[0].account_type == LineAccountType.CASH
    assert journal_entry.lines[1].entry_type == EntrySide.CREDIT


def test_post_unbalanced_entry_leaves_store_unchanged(journal_service):
    """Test that a one-cent-over imbalance is rejected with nothing written."""
    with pytest.raises(UnbalancedEntryError, match="Debits and credits must balance"):
        journal_service.post_journal_entry(
            "Cash sale",
            _lines(("cash", "debit", "500"), ("sales", "credit", "499")),
        )

    assert journal_service.list_journal_entries() == []


def test_balance_tolerance_is_one_cent():
    """Test that a difference of exactly 0.01 is accepted and more is not."""
    within = [coerce_posting_line(line) for line in _lines(("cash", "debit", "100.01"), ("sales", "credit", "100.00"))]
    beyond = [coerce_posting_line(line) for line in _lines(("cash", "debit", "100.02"), ("sales", "credit", "100.00"))]

    assert check_balanced(within) == (Decimal("100.01"), Decimal("100.00"))
    with pytest.raises(UnbalancedEntryError):
        check_balanced(beyond)


def test_multi_line_entry_balances_on_totals(journal_service):
    """Test that several lines per side balance on their sums."""
    journal_entry_id = journal_service.post_journal_entry(
        "Mixed payment sale",
        _lines(
            ("cash", "debit", "300"),
            ("bank", "debit", "200"),
            ("sales", "credit", "450"),
            ("other", "credit", "50", "Sales Tax Payable"),
        ),
    )

    journal_entry = journal_service.get_journal_entry(journal_entry_id)
    assert len(journal_entry.lines) == 4
    assert journal_entry.total_debit == journal_entry.total_credit == Decimal("500")


def test_accepts_posting_line_objects(journal_service):
    """Test that PostingLine instances are accepted as well as mappings."""
    journal_entry_id = journal_service.post_journal_entry(
        "Owner investment",
        [
            PostingLine(LineAccountType.BANK, EntrySide.DEBIT, Decimal("1000")),
            PostingLine(LineAccountType.OTHER, EntrySide.CREDIT, Decimal("1000"), account_name="Owner's Capital"),
        ],
    )

    lines = journal_service.get_journal_entry(journal_entry_id).lines
    assert lines[1].account_name == "Owner's Capital"


@pytest.mark.parametrize(
    "description,lines,message",
    [
        ("", _lines(("cash", "debit", "1"), ("sales", "credit", "1")), "Description is required"),
        ("Sale", _lines(("cash", "debit", "1")), "at least two lines"),
        ("Sale", _lines(("cash", "debit", "0"), ("sales", "credit", "0")), "greater than 0"),
        ("Sale", _lines(("cash", "debit", "-5"), ("sales", "credit", "-5")), "greater than 0"),
        ("Sale", _lines(("till", "debit", "1"), ("sales", "credit", "1")), "Invalid account type"),
        ("Sale", _lines(("cash", "both", "1"), ("sales", "credit", "1")), "Invalid entry type"),
        ("Sale", _lines(("cash", "debit", "1"), ("other", "credit", "1")), "must name an account"),
    ],
)
def test_invalid_entries_are_rejected_before_writing(journal_service, description, lines, message):
    """Test validation failures carry their message and write nothing."""
    with pytest.raises(ValidationError, match=message):
        journal_service.post_journal_entry(description, lines)

    assert journal_service.list_journal_entries() == []


def test_non_decimal_amount_is_rejected():
    """Test that float and string amounts are refused at the boundary."""
    with pytest.raises(ValidationError, match="decimal number"):
        coerce_posting_line({"account_type": "cash", "entry_type": "debit", "amount": 10.5})
    with pytest.raises(ValidationError, match="decimal number"):
        coerce_posting_line({"account_type": "cash", "entry_type": "debit", "amount": "10.50"})


def test_integer_amount_is_accepted():
    """Test that whole-number amounts are converted to decimals."""
    line = coerce_posting_line({"account_type": "cash", "entry_type": "debit", "amount": 10})

    assert line.amount == Decimal("10.00")


def test_failed_line_insert_writes_no_header(temp_db):
    """Test that the header and lines are written in a single transaction."""
    lines = [
        PostingLine(LineAccountType.CASH, EntrySide.DEBIT, Decimal("100")),
        PostingLine(LineAccountType.SALES, EntrySide.CREDIT, Decimal("0")),
    ]

    with pytest.raises(IntegrityError):
        temp_db.create_journal_entry("alice", date(2024, 1, 1), "Broken", lines)

    assert temp_db.list_journal_entries("alice") == []


def test_delete_journal_entry(journal_service):
    """Test that deleting an entry removes it with its lines."""
    journal_entry_id = journal_service.post_journal_entry(
        "Cash sale", _lines(("cash", "debit", "10"), ("sales", "credit", "10"))
    )

    journal_service.delete_journal_entry(journal_entry_id)

    assert journal_service.get_journal_entry(journal_entry_id) is None
    assert journal_service.list_book("cash") == []


def test_delete_missing_journal_entry(journal_service):
    """Test that deleting an unknown entry raises NotFoundError."""
    with pytest.raises(NotFoundError, match="Journal entry 99 not found"):
        journal_service.delete_journal_entry(99)


def test_journal_entries_are_scoped_to_owner(temp_db, journal_service):
    """Test that one owner cannot read or delete another owner's entries."""
    journal_entry_id = journal_service.post_journal_entry(
        "Cash sale", _lines(("cash", "debit", "10"), ("sales", "credit", "10"))
    )
    other = JournalService(temp_db, "bob")

    assert other.get_journal_entry(journal_entry_id) is None
    assert other.list_journal_entries() == []
    with pytest.raises(NotFoundError):
        other.delete_journal_entry(journal_entry_id)
    assert journal_service.get_journal_entry(journal_entry_id) is not None


def test_list_journal_entries_by_date(journal_service):
    """Test date filtering and newest-first ordering."""
    for day in (5, 20, 12):
        journal_service.post_journal_entry(
            f"Sale {day}",
            _lines(("cash", "debit", "10"), ("sales", "credit", "10")),
            entry_date=date(2024, 2, day),
        )

    entries = journal_service.list_journal_entries()
    assert [e.entry_date.day for e in entries] == [20, 12, 5]

    filtered = journal_service.list_journal_entries(start_date=date(2024, 2, 10), end_date=date(2024, 2, 15))
    assert [e.description for e in filtered] == ["Sale 12"]


def test_list_book(journal_service):
    """Test that a book lists only lines of its account type, with header fields."""
    journal_service.post_journal_entry(
        "Cash sale",
        _lines(("cash", "debit", "500", "Cash"), ("sales", "credit", "500", "Sales Revenue")),
        entry_date=date(2024, 1, 10),
        reference_number="INV-1",
    )
    journal_service.post_journal_entry(
        "Rent",
        _lines(("other", "debit", "200", "Rent Expense"), ("cash", "credit", "200", "Cash")),
        entry_date=date(2024, 1, 11),
    )

    cash_rows = journal_service.list_book("cash")
    assert [(r.description, r.entry_type) for r in cash_rows] == [
        ("Rent", EntrySide.CREDIT),
        ("Cash sale", EntrySide.DEBIT),
    ]
    assert cash_rows[1].reference_number == "INV-1"

    ledger_rows = journal_service.list_book("ledger")
    assert [r.account_name for r in ledger_rows] == ["Rent Expense"]

    with pytest.raises(ValidationError, match="Invalid book"):
        journal_service.list_book("petty")
