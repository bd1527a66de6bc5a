"""
Budget allocation calculator.

Turns budget categories, subcategories and transactions into allocated
and spent amounts.

Allocation rules:

  total_income = sum of `amount` over income categories

  category (expense):
    1. percent set -> percent% of total_income
    2. amount set  -> amount
    3. otherwise   -> sum of the fixed `amount` of its subcategories that
                      have no percent (percent children have no value of
                      their own until the parent is resolved)
  category (income): its own amount

  subcategory:
    1. percent set -> percent% of the parent's allocation
    2. amount set  -> amount
    3. otherwise   -> 0

"Set" means present and not an empty string; percent always wins over
amount when both are stored. Percent math is rounded half-up via
`percent_of`, and no reconciliation is applied: several percent
subcategories may drift a unit or two from their parent's total.

Nothing here clamps or raises. Over-allocated data (expense allocations
above income, subcategories above their parent) computes the true
arithmetic result. The write-time guards at the bottom of the module only
report the overflow a proposed write would cause; rejecting it is the
caller's decision.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Iterable, Sequence

from moco.calculators.formatting import percent_of, round_half_up, to_amount, to_number
from moco.calculators.snapshots import (
    CategoryRecord,
    Entry,
    ExpenseEntry,
    Period,
    SubcategoryRecord,
)


def is_set(value) -> bool:
    return value is not None and value != ""


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------

def total_income(categories: Iterable[CategoryRecord] | None) -> int:
    return sum(to_amount(c.amount) for c in categories or [] if c.type == "income")


def allocated_for_category(
    category: CategoryRecord,
    income: int,
    subcategories: Iterable[SubcategoryRecord] | None = None,
) -> int:
    """Budgeted amount of a category (see module docstring for the rules)."""
    if category is None:
        return 0
    if category.type == "income":
        return to_amount(category.amount)
    if is_set(category.percent):
        return percent_of(category.percent, income)
    if is_set(category.amount):
        return to_amount(category.amount)
    return sum(
        to_amount(sub.amount)
        for sub in subcategories or []
        if sub.category_id == category.id
        and not is_set(sub.percent)
        and is_set(sub.amount)
    )


def allocated_for_subcategory(subcategory: SubcategoryRecord, parent_allocated: int) -> int:
    if subcategory is None:
        return 0
    if is_set(subcategory.percent):
        return percent_of(subcategory.percent, parent_allocated)
    if is_set(subcategory.amount):
        return to_amount(subcategory.amount)
    return 0


# ---------------------------------------------------------------------------
# Spending
# ---------------------------------------------------------------------------

def _expenses(transactions: Iterable[Entry] | None, period: Period | None):
    for entry in transactions or []:
        if not isinstance(entry, ExpenseEntry):
            continue
        if period is not None and not period.contains(entry.date):
            continue
        yield entry


def spent_for_category(
    category: CategoryRecord,
    transactions: Iterable[Entry] | None,
    subcategories: Iterable[SubcategoryRecord] | None = None,
    period: Period | None = None,
) -> int:
    """
    Expense total booked against a category or any of its subcategories.

    Each transaction is counted once even when it carries both the
    category id and one of the category's subcategory ids.
    """
    if category is None:
        return 0
    sub_ids = {sub.id for sub in subcategories or [] if sub.category_id == category.id}
    seen: set = set()
    spent = 0
    for entry in _expenses(transactions, period):
        if entry.category_id != category.id and entry.subcategory_id not in sub_ids:
            continue
        key = entry.id if entry.id is not None else id(entry)
        if key in seen:
            continue
        seen.add(key)
        spent += to_amount(entry.amount)
    return spent


def spent_for_subcategory(
    subcategory: SubcategoryRecord,
    transactions: Iterable[Entry] | None,
    period: Period | None = None,
) -> int:
    if subcategory is None:
        return 0
    return sum(
        to_amount(entry.amount)
        for entry in _expenses(transactions, period)
        if entry.subcategory_id == subcategory.id
    )


def percent_used(spent: int, allocated: int) -> int:
    """Share of the allocation already spent, capped at 100."""
    if not allocated or allocated <= 0:
        return 0
    return min(100, round_half_up(to_number(spent) * 100 / allocated))


# ---------------------------------------------------------------------------
# Snapshot and report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubcategoryBudget:
    id: Any
    name: str
    percent: float | None
    amount: int | None
    allocated: int
    spent: int
    percent_used: int


@dataclass(frozen=True)
class CategoryBudget:
    id: Any
    name: str
    percent: float | None
    amount: int | None
    allocated: int
    spent: int
    percent_used: int
    percent_display: float | None
    sub_allocated_total: int
    is_full: bool
    subcategories: list[SubcategoryBudget] = field(default_factory=list)


@dataclass(frozen=True)
class IncomeLine:
    id: Any
    name: str
    amount: int


@dataclass(frozen=True)
class BudgetReport:
    period: Period | None
    total_income: int
    total_allocated: int
    unallocated_income: int
    total_spent: int
    income: list[IncomeLine]
    categories: list[CategoryBudget]


def _optional_percent(value) -> float | None:
    return float(to_number(value)) if is_set(value) else None


def _optional_amount(value) -> int | None:
    return to_amount(value) if is_set(value) else None


@dataclass(frozen=True)
class BudgetSnapshot:
    """Everything the budget views need, frozen at load time."""
    categories: Sequence[CategoryRecord] = ()
    subcategories: Sequence[SubcategoryRecord] = ()
    transactions: Sequence[Entry] = ()
    period: Period | None = None

    @cached_property
    def total_income(self) -> int:
        return total_income(self.categories)

    @property
    def income_categories(self) -> list[CategoryRecord]:
        return [c for c in self.categories if c.type == "income"]

    @property
    def expense_categories(self) -> list[CategoryRecord]:
        return [c for c in self.categories if c.type == "expense"]

    def subcategories_of(self, category_id) -> list[SubcategoryRecord]:
        return [s for s in self.subcategories if s.category_id == category_id]

    def allocated_for(self, category: CategoryRecord) -> int:
        return allocated_for_category(category, self.total_income, self.subcategories)

    def total_allocated(self) -> int:
        return sum(self.allocated_for(c) for c in self.expense_categories)

    def total_spent(self) -> int:
        return sum(to_amount(e.amount) for e in _expenses(self.transactions, self.period))

    def category_budget(self, category: CategoryRecord) -> CategoryBudget:
        allocated = self.allocated_for(category)
        spent = spent_for_category(category, self.transactions, self.subcategories, self.period)

        sub_rows = []
        for sub in self.subcategories_of(category.id):
            sub_allocated = allocated_for_subcategory(sub, allocated)
            sub_spent = spent_for_subcategory(sub, self.transactions, self.period)
            sub_rows.append(SubcategoryBudget(
                id=sub.id,
                name=sub.name,
                percent=_optional_percent(sub.percent),
                amount=_optional_amount(sub.amount),
                allocated=sub_allocated,
                spent=sub_spent,
                percent_used=percent_used(sub_spent, sub_allocated),
            ))
        sub_total = sum(row.allocated for row in sub_rows)

        if is_set(category.percent):
            percent_display = float(to_number(category.percent))
        elif allocated and self.total_income:
            percent_display = float(round_half_up(to_number(allocated) * 100 / self.total_income))
        else:
            percent_display = None

        return CategoryBudget(
            id=category.id,
            name=category.name,
            percent=_optional_percent(category.percent),
            amount=_optional_amount(category.amount),
            allocated=allocated,
            spent=spent,
            percent_used=percent_used(spent, allocated),
            percent_display=percent_display,
            sub_allocated_total=sub_total,
            is_full=allocated > 0 and sub_total >= allocated,
            subcategories=sub_rows,
        )

    def report(self) -> BudgetReport:
        allocated = self.total_allocated()
        return BudgetReport(
            period=self.period,
            total_income=self.total_income,
            total_allocated=allocated,
            unallocated_income=max(0, self.total_income - allocated),
            total_spent=self.total_spent(),
            income=[
                IncomeLine(id=c.id, name=c.name, amount=to_amount(c.amount))
                for c in self.income_categories
            ],
            categories=[self.category_budget(c) for c in self.expense_categories],
        )


# ---------------------------------------------------------------------------
# Write-time guards
# ---------------------------------------------------------------------------

def expense_allocation_overflow(
    snapshot: BudgetSnapshot,
    proposed: CategoryRecord,
    editing_id: Any = None,
) -> int:
    """
    How far total expense allocation would exceed income after a write.

    Returns 0 when the write fits, when the proposed category is an
    income category, or when there is no income to compare against.
    """
    if proposed.type != "expense" or snapshot.total_income <= 0:
        return 0
    existing = sum(
        snapshot.allocated_for(c)
        for c in snapshot.expense_categories
        if editing_id is None or c.id != editing_id
    )
    overflow = existing + snapshot.allocated_for(proposed) - snapshot.total_income
    return max(0, overflow)


def subcategory_allocation_overflow(
    snapshot: BudgetSnapshot,
    parent: CategoryRecord,
    proposed: SubcategoryRecord,
    editing_id: Any = None,
) -> int:
    """
    How far a category's subcategories would exceed its allocation after
    a write. The parent is re-resolved with the proposed subcategory in
    place, so categories that take their value from fixed children stay
    consistent.
    """
    siblings = [
        s for s in snapshot.subcategories_of(parent.id)
        if editing_id is None or s.id != editing_id
    ]
    after = siblings + [proposed]
    parent_allocated = allocated_for_category(parent, snapshot.total_income, after)
    total = sum(allocated_for_subcategory(s, parent_allocated) for s in after)
    return max(0, total - parent_allocated)
