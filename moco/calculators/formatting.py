"""
Amount parsing, coercion and display formatting.

moco amounts are whole currency units (Rupiah has no minor unit in
everyday use), so every monetary value is a plain non-negative int.
Display strings use grouped thousands with no decimal component:

    1234567  ->  "1.234.567"  ->  "Rp 1.234.567"

Rounding:
  Every percent-derived amount in the project goes through
  `round_half_up`. Python's built-in round() uses banker's rounding
  (round(2.5) == 2), which would make allocation previews disagree with
  what users compute by hand, so it is never used for money.

Coercion:
  Rows arrive from storage and from clients with nulls, empty strings and
  the occasional garbage value. `to_amount` turns all of those into 0 so
  the calculators stay total functions.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext


_NON_DIGITS = re.compile(r"\D")

# Longer values are garbage, not money; also keeps int/str conversion
# under the interpreter's digit limit.
_MAX_DIGITS = 4000


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero."""
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return 0
    if not number.is_finite() or number.adjusted() >= _MAX_DIGITS:
        return 0
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + 2)
        return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_amount(value) -> int:
    """
    Coerce a stored or submitted amount to an int.

    None, "", booleans, non-numeric strings and non-finite numbers all
    become 0. Numeric strings and floats are rounded half-up.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str) and not value.strip():
        return 0
    return round_half_up(value.strip() if isinstance(value, str) else value)


def to_number(value) -> Decimal:
    """Coerce a percent-like value to Decimal, 0 when malformed."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return number if number.is_finite() else Decimal(0)


def percent_of(percent, base) -> int:
    """`percent`% of `base`, rounded half-up. Zero base yields 0."""
    base_amount = to_amount(base)
    if base_amount == 0:
        return 0
    return round_half_up(to_number(percent) * base_amount / 100)


def parse_amount(text) -> int:
    """
    Parse a display string back into an amount.

    Every non-digit character is discarded, so "Rp 1.234.567", "1,234,567"
    and "1234567" all parse to 1234567. Empty or digit-free input is 0.
    Signs and decimal points are not supported.
    """
    if text is None:
        return 0
    digits = _NON_DIGITS.sub("", str(text))
    if not digits or len(digits) > _MAX_DIGITS:
        return 0
    return int(digits)


def format_amount(value, separator: str = ".") -> str:
    """Render an amount with grouped thousands, e.g. 1234567 -> "1.234.567"."""
    amount = to_amount(value)
    return f"{amount:,}".replace(",", separator)


def format_currency(value, label: str = "Rp", separator: str = ".") -> str:
    """Prefix the formatted amount with a currency label: "Rp 1.234.567"."""
    return f"{label} {format_amount(value, separator)}"
