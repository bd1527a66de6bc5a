"""
Immutable snapshot types consumed by the calculators.

The calculators never see ORM objects. Services load rows for the current
user, convert them here, and pass plain frozen dataclasses down. That keeps
every calculator a pure function of its arguments and makes them trivially
testable without a database.

Transactions as a tagged union:
  A stored transaction row means different things depending on `type`.
  Instead of one record with many nullable columns, a snapshot is one of

    IncomeEntry    money into `wallet_id`
    ExpenseEntry   money out of `wallet_id`, optionally budgeted
    TransferEntry  money moved from `transfer_from` to `transfer_to_id`

  `entry_from_row` performs the conversion and returns None for rows whose
  type is unknown, so malformed rows contribute nothing to any aggregate.

Rows may be ORM instances or plain mappings (e.g. JSON fixtures); the
`_field` helper reads either.
"""

import datetime as dt
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

from moco.calculators.formatting import to_amount


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IncomeEntry:
    id: Any
    amount: int
    wallet_id: Any
    date: dt.date | None = None
    category_id: Any = None
    type: str = "income"


@dataclass(frozen=True)
class ExpenseEntry:
    id: Any
    amount: int
    wallet_id: Any
    date: dt.date | None = None
    category_id: Any = None
    subcategory_id: Any = None
    type: str = "expense"


@dataclass(frozen=True)
class TransferEntry:
    id: Any
    amount: int
    transfer_from: Any
    transfer_to_id: Any
    date: dt.date | None = None
    type: str = "transfer"


Entry = Union[IncomeEntry, ExpenseEntry, TransferEntry]


# ---------------------------------------------------------------------------
# Budget, goals, debts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CategoryRecord:
    id: Any
    type: str
    name: str = ""
    percent: Any = None
    amount: Any = None


@dataclass(frozen=True)
class SubcategoryRecord:
    id: Any
    category_id: Any
    name: str = ""
    percent: Any = None
    amount: Any = None


@dataclass(frozen=True)
class GoalRecord:
    id: Any
    target_amount: Any
    saving_amount: Any = 0
    saving_frequency: str = "monthly"
    wallet_id: Any = None
    name: str = ""


@dataclass(frozen=True)
class DebtRecord:
    id: Any
    type: str
    amount: Any
    name: str = ""


@dataclass(frozen=True)
class PaymentRecord:
    id: Any
    debt_id: Any
    amount: Any


@dataclass(frozen=True)
class Period:
    """A calendar month. `start` and `end` are both inclusive."""
    year: int
    month: int

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        if self.month == 12:
            return date(self.year, 12, 31)
        return date.fromordinal(date(self.year, self.month + 1, 1).toordinal() - 1)

    def contains(self, value: date | None) -> bool:
        if value is None:
            return False
        return self.start <= value <= self.end

    @classmethod
    def of(cls, value: date) -> "Period":
        return cls(value.year, value.month)


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------

def _field(row, name: str, default=None):
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)


def _as_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def entry_from_row(row) -> Entry | None:
    """Convert a stored transaction row into its tagged snapshot."""
    txn_type = _field(row, "type")
    common = {
        "id": _field(row, "id"),
        "amount": to_amount(_field(row, "amount")),
        "date": _as_date(_field(row, "date")),
    }
    if txn_type == "income":
        return IncomeEntry(
            wallet_id=_field(row, "wallet_id"),
            category_id=_field(row, "category_id"),
            **common,
        )
    if txn_type == "expense":
        return ExpenseEntry(
            wallet_id=_field(row, "wallet_id"),
            category_id=_field(row, "category_id"),
            subcategory_id=_field(row, "subcategory_id"),
            **common,
        )
    if txn_type == "transfer":
        return TransferEntry(
            transfer_from=_field(row, "transfer_from"),
            transfer_to_id=_field(row, "transfer_to_id"),
            **common,
        )
    return None


def entries_from_rows(rows) -> list[Entry]:
    entries = (entry_from_row(row) for row in rows or [])
    return [entry for entry in entries if entry is not None]


def category_from_row(row) -> CategoryRecord:
    return CategoryRecord(
        id=_field(row, "id"),
        type=_field(row, "type") or "expense",
        name=_field(row, "name") or "",
        percent=_field(row, "percent"),
        amount=_field(row, "amount"),
    )


def subcategory_from_row(row) -> SubcategoryRecord:
    return SubcategoryRecord(
        id=_field(row, "id"),
        category_id=_field(row, "category_id"),
        name=_field(row, "name") or "",
        percent=_field(row, "percent"),
        amount=_field(row, "amount"),
    )


def goal_from_row(row) -> GoalRecord:
    return GoalRecord(
        id=_field(row, "id"),
        name=_field(row, "name") or "",
        target_amount=_field(row, "target_amount"),
        saving_amount=_field(row, "saving_amount", 0),
        saving_frequency=_field(row, "saving_frequency") or "monthly",
        wallet_id=_field(row, "wallet_id"),
    )


def debt_from_row(row) -> DebtRecord:
    return DebtRecord(
        id=_field(row, "id"),
        type=_field(row, "type"),
        name=_field(row, "name") or "",
        amount=_field(row, "amount"),
    )


def payment_from_row(row) -> PaymentRecord:
    return PaymentRecord(
        id=_field(row, "id"),
        debt_id=_field(row, "debt_id"),
        amount=_field(row, "amount"),
    )
