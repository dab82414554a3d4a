"""Tests for flat entry recording."""

import pytest
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import BookCategory, PartyType, TransactionType
from ledgerbook.domain.entry import EntryService, compute_entry_amounts
from ledgerbook.domain.errors import ValidationError


def test_payroll_net_pay():
    """Test payroll totals gross pay plus allowances minus deductions."""
    amounts = compute_entry_amounts(
        TransactionType.PAYROLL,
        gross_pay=Decimal("3000"),
        allowances=Decimal("200"),
        deductions=Decimal("150"),
    )

    assert amounts.net_pay == Decimal("3050.00")
    assert amounts.total_amount == Decimal("3050.00")
    assert amounts.tax_amount == Decimal("0")
    assert amounts.balance_due == Decimal("0")


def test_sale_amounts_with_tax_and_discount():
    """Test quantity x price less discount, plus tax, less amount paid."""
    amounts = compute_entry_amounts(
        TransactionType.CREDIT_SALE,
        quantity=Decimal("10"),
        unit_price=Decimal("50"),
        discount=Decimal("20"),
        tax_rate=Decimal("7.5"),
        amount_paid=Decimal("100"),
    )

    assert amounts.amount_before_tax == Decimal("480.00")
    assert amounts.tax_amount == Decimal("36.00")
    assert amounts.total_amount == Decimal("516.00")
    assert amounts.balance_due == Decimal("416.00")
    assert amounts.net_pay is None


def test_missing_inputs_count_as_zero():
    """Test that absent numeric inputs are treated as zero."""
    amounts = compute_entry_amounts(TransactionType.CASH_SALE, quantity=Decimal("3"), unit_price=Decimal("2.50"))

    assert amounts.total_amount == Decimal("7.50")
    assert amounts.balance_due == Decimal("7.50")


def test_amounts_round_half_up_to_cents():
    """Test that tax is rounded to cents, half up."""
    amounts = compute_entry_amounts(
        TransactionType.CASH_SALE,
        quantity=Decimal("1"),
        unit_price=Decimal("0.10"),
        tax_rate=Decimal("5"),
    )

    # 0.10 * 5% = 0.005 -> 0.01
    assert amounts.tax_amount == Decimal("0.01")
    assert amounts.total_amount == Decimal("0.11")


def test_create_entry_round_trip(entry_service):
    """Test that a stored entry reads back with the computed total and book."""
    entry_id = entry_service.create_entry(
        transaction_type="cash_sale",
        transaction_date=date(2024, 3, 1),
        description="Counter sale",
        quantity=Decimal("4"),
        unit_price=Decimal("25"),
        tax_rate=Decimal("10"),
        party_name="Walk-in",
        party_type="customer",
    )

    entry = entry_service.get_entry(entry_id)
    assert entry.transaction_type == TransactionType.CASH_SALE
    assert entry.book_category == BookCategory.SALES_BOOK
    assert entry.total_amount == Decimal("110.00")
    assert entry.amount_before_tax == Decimal("100.00")
    assert entry.tax_amount == Decimal("10.00")
    assert entry.party_type == PartyType.CUSTOMER
    assert entry.transaction_date == date(2024, 3, 1)
    assert not entry.is_posted


def test_create_payroll_entry_round_trip(entry_service):
    """Test that payroll entries store net pay as the total."""
    entry_id = entry_service.create_entry(
        transaction_type=TransactionType.PAYROLL,
        gross_pay=Decimal("3000"),
        allowances=Decimal("200"),
        deductions=Decimal("150"),
        employee_id="E-7",
    )

    entry = entry_service.get_entry(entry_id)
    assert entry.total_amount == Decimal("3050.00")
    assert entry.net_pay == Decimal("3050.00")
    assert entry.book_category == BookCategory.PAYROLL_BOOK


def test_create_entry_defaults_to_today(entry_service):
    """Test that the transaction date defaults to today."""
    entry_id = entry_service.create_entry(transaction_type="expense", quantity=Decimal("1"), unit_price=Decimal("5"))

    assert entry_service.get_entry(entry_id).transaction_date == date.today()


@pytest.mark.parametrize("bad_type", [None, "", "gift"])
def test_create_entry_rejects_bad_type_without_writing(entry_service, bad_type):
    """Test that a missing or unknown transaction type is rejected before any write."""
    with pytest.raises(ValidationError):
        entry_service.create_entry(transaction_type=bad_type, quantity=Decimal("1"), unit_price=Decimal("5"))

    assert entry_service.list_entries() == []


def test_create_entry_rejects_bad_party_type(entry_service):
    """Test that choice fields outside their closed set are rejected."""
    with pytest.raises(ValidationError, match="party type"):
        entry_service.create_entry(transaction_type="cash_sale", party_type="vendor")

    assert entry_service.list_entries() == []


def test_post_requires_positive_total(entry_service):
    """Test that posting a zero total is rejected before the entry is stored."""
    with pytest.raises(ValidationError, match="Total amount must be greater than 0"):
        entry_service.create_entry(transaction_type="cash_sale", post=True)

    assert entry_service.list_entries() == []


def test_list_entries_filters(entry_service):
    """Test filtering entries by date, book and type."""
    entry_service.create_entry(
        transaction_type="cash_sale", transaction_date=date(2024, 1, 5), quantity=Decimal("1"), unit_price=Decimal("10")
    )
    entry_service.create_entry(
        transaction_type="cash_purchase", transaction_date=date(2024, 2, 5), quantity=Decimal("1"), unit_price=Decimal("4")
    )
    entry_service.create_entry(
        transaction_type="credit_sale", transaction_date=date(2024, 3, 5), quantity=Decimal("1"), unit_price=Decimal("7")
    )

    all_entries = entry_service.list_entries()
    assert [e.transaction_date for e in all_entries] == [date(2024, 3, 5), date(2024, 2, 5), date(2024, 1, 5)]

    sales = entry_service.list_entries(book_category="sales_book")
    assert {e.transaction_type for e in sales} == {TransactionType.CASH_SALE, TransactionType.CREDIT_SALE}

    february = entry_service.list_entries(start_date=date(2024, 2, 1), end_date=date(2024, 2, 29))
    assert len(february) == 1
    assert february[0].transaction_type == TransactionType.CASH_PURCHASE

    assert len(entry_service.list_entries(transaction_type="credit_sale")) == 1


def test_entries_are_scoped_to_owner(temp_db, entry_service):
    """Test that another owner cannot see an entry."""
    entry_id = entry_service.create_entry(transaction_type="cash_sale", quantity=Decimal("1"), unit_price=Decimal("1"))
    other = EntryService(temp_db, "bob")

    assert other.get_entry(entry_id) is None
    assert other.list_entries() == []
