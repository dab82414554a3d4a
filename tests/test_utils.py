"""Tests for amount and date utilities."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from ledgerbook.utils.amount_parser import money, parse_amount, parse_optional_amount
from ledgerbook.utils.date_parser import get_date_range, month_key, parse_date


def test_parse_amount():
    """Test parsing various amount formats."""
    assert parse_amount("123.45") == Decimal("123.45")
    assert parse_amount("$1,234.56") == Decimal("1234.56")
    assert parse_amount("₦5,000") == Decimal("5000")
    assert parse_amount("-12.5") == Decimal("-12.5")
    assert parse_amount("(99.99)") == Decimal("-99.99")


@pytest.mark.parametrize("bad", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_errors(bad):
    """Test that malformed amounts raise rather than defaulting to zero."""
    with pytest.raises(ValueError):
        parse_amount(bad)


def test_parse_optional_amount():
    """Test that blank optional amounts are None."""
    assert parse_optional_amount(None) is None
    assert parse_optional_amount(" ") is None
    assert parse_optional_amount("7") == Decimal("7")


def test_money_rounds_half_up():
    """Test cent rounding."""
    assert money(Decimal("2.345")) == Decimal("2.35")
    assert money(Decimal("2.344")) == Decimal("2.34")
    assert money(None) == Decimal("0.00")


def test_parse_date():
    """Test absolute and relative dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("today") == date.today()
    assert parse_date("yesterday") == date.today() - timedelta(days=1)
    assert parse_date("this month") == date.today().replace(day=1)

    with pytest.raises(ValueError):
        parse_date("not a date")


@pytest.mark.parametrize(
    "period,expected",
    [
        ("this-month", (date(2024, 5, 1), date(2024, 5, 20))),
        ("this-quarter", (date(2024, 4, 1), date(2024, 5, 20))),
        ("this-year", (date(2024, 1, 1), date(2024, 5, 20))),
        ("last-month", (date(2024, 4, 1), date(2024, 4, 30))),
        ("last-quarter", (date(2024, 1, 1), date(2024, 3, 31))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
    ],
)
def test_get_date_range(period, expected):
    """Test reporting periods relative to a fixed day."""
    assert get_date_range(period, today=date(2024, 5, 20)) == expected


def test_get_date_range_unknown():
    """Test unknown periods are rejected."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-week")


def test_month_key():
    assert month_key(date(2024, 2, 9)) == "2024-02"
