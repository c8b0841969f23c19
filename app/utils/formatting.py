"""
Currency, phone and document-number formatting.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

Number = Union[int, float, Decimal]

CURRENCY_SYMBOLS = {
    "INR": "Rs",
    "USD": "$",
    "EUR": "EUR",
    "GBP": "GBP",
}


# =============================================================================
# MONEY
# =============================================================================

def to_decimal(value: Number) -> Decimal:
    """Money value rounded to 2 decimals."""
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def group_indian(digits: str) -> str:
    """
    Indian digit grouping: last three digits, then pairs.

    Example:
        >>> group_indian("1234567")
        '12,34,567'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_amount(value: Number, currency: str = "INR") -> str:
    """
    Display an amount without decimals.

    Example:
        >>> format_amount(Decimal("12345.00"))
        'Rs 12,345'
    """
    rounded = int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))
    if currency == "INR":
        grouped = group_indian(digits)
    else:
        grouped = f"{int(digits):,}"
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{sign}{symbol} {grouped}"


# =============================================================================
# PHONE NUMBERS
# =============================================================================

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: Optional[str], country_code: str = "91") -> str:
    """
    Digits-only international number for wa.me links.

    Example:
        >>> normalize_phone("+91 98765-43210")
        '919876543210'
        >>> normalize_phone("98765 43210")
        '919876543210'
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if not digits:
        return ""
    if not digits.startswith(country_code):
        digits = f"{country_code}{digits}"
    return digits


# =============================================================================
# DOCUMENT NUMBERS
# =============================================================================

def format_document_number(prefix: str, number: int, width: int = 5) -> str:
    """INV + 42 -> 'INV-00042'"""
    return f"{prefix}-{number:0{width}d}"


def parse_document_number(value: Optional[str], prefix: str) -> Optional[int]:
    """Numeric part of 'PREFIX-00042', or None when the value uses another prefix."""
    if not value:
        return None
    match = re.fullmatch(rf"{re.escape(prefix)}-(\d+)", value)
    return int(match.group(1)) if match else None


def next_document_number(existing: Iterable[Optional[str]], prefix: str, start_number: int = 1, width: int = 5) -> str:
    """
    Next number in a PREFIX-NNNNN sequence.

    The next value is ``max(highest existing, start_number - 1) + 1`` so a
    start number raised in settings is honoured and never reused.
    """
    highest = max(
        (n for n in (parse_document_number(v, prefix) for v in existing) if n is not None),
        default=0,
    )
    return format_document_number(prefix, max(highest, start_number - 1) + 1, width)
