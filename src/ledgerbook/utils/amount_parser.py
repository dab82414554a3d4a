"""Amount parsing and rounding utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
from typing import Any, Optional

from ledgerbook.logging_config import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string is empty or cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₦]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_optional_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """Parse an optional amount. Blank input yields None."""
    if amount_str is None or not str(amount_str).strip():
        return None
    return parse_amount(str(amount_str))


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric value to Decimal for aggregation.

    None and unparsable values count as zero so that a single bad row never
    aborts a statement. Unparsable values are logged.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        logger.warning("unparsable_amount", value=repr(value))
        return ZERO
    if not result.is_finite():
        logger.warning("unparsable_amount", value=repr(value))
        return ZERO
    return result


def money(value: Any) -> Decimal:
    """Round to cents, half up."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
