"""
Field types shared by the request schemas.

Amounts may be posted either as integers (1500000) or as the display
strings the UI renders ("1.500.000", "Rp 1.500.000"). The before-validator
runs strings through `parse_amount`, so the rest of the API only ever sees
whole-unit ints.
"""

from datetime import date, datetime, timezone
from typing import Annotated, Literal

from pydantic import BeforeValidator, Field

from moco.calculators.formatting import parse_amount, to_amount


# Largest value a BigInteger column holds
MAX_AMOUNT = 9_223_372_036_854_775_807


def _coerce_amount(value):
    if isinstance(value, str):
        if sum(ch.isdigit() for ch in value) > len(str(MAX_AMOUNT)):
            raise ValueError("amount is too large")
        return parse_amount(value)
    if isinstance(value, float):
        return to_amount(value)
    return value


Amount = Annotated[int, BeforeValidator(_coerce_amount), Field(le=MAX_AMOUNT)]

# Percent of a parent amount, 0-100 inclusive
Percent = Annotated[float, Field(ge=0, le=100)]

SavingFrequency = Literal["weekly", "monthly"]
DebtType = Literal["hutang", "piutang"]


def today() -> date:
    return datetime.now(timezone.utc).date()
