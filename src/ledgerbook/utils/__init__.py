"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date, get_date_range
from ledgerbook.utils.amount_parser import parse_amount, parse_optional_amount, to_decimal, money

__all__ = [
    "parse_date",
    "get_date_range",
    "parse_amount",
    "parse_optional_amount",
    "to_decimal",
    "money",
]
