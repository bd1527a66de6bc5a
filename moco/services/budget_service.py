"""
Budget service: categories, subcategories and the monthly budget report.

Reads build a BudgetSnapshot (all of the user's categories, subcategories
and transactions) and hand it to `moco.calculators.budget`. Nothing the
calculator derives is written back.

Write-time guards:
  The calculators accept over-allocated data and just report the
  arithmetic. New writes are held to two limits:

    1. the allocations of all expense categories may not exceed total
       income (skipped while the user has no income recorded)
    2. the allocations of a category's subcategories may not exceed the
       category's own allocation

  Both are checked against the snapshot with the proposed row swapped in
  (`expense_allocation_overflow`, `subcategory_allocation_overflow`) and
  rejected with OverAllocationError. Data that was already over-allocated
  before a write (e.g. after income was lowered) keeps computing normally.
"""

import logging
import uuid
from dataclasses import asdict

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.budget import (
    BudgetSnapshot,
    allocated_for_category,
    allocated_for_subcategory,
    expense_allocation_overflow,
    subcategory_allocation_overflow,
)
from moco.calculators.snapshots import (
    CategoryRecord,
    Period,
    SubcategoryRecord,
    category_from_row,
    subcategory_from_row,
)
from moco.events import DELETE, INSERT, UPDATE, record_change
from moco.exceptions import InvalidBudgetInputError, InvalidReferenceError, OverAllocationError
from moco.models.budget import BudgetCategory, BudgetSubcategory
from moco.models.transaction import Transaction
from moco.services.queries import get_owned, get_reference, list_owned, load_entries


logger = logging.getLogger(__name__)


async def load_snapshot(
    db: AsyncSession,
    user_id: uuid.UUID,
    period: Period | None = None,
) -> BudgetSnapshot:
    """Load everything the budget calculator needs for one user."""
    categories = await list_owned(db, BudgetCategory, user_id, BudgetCategory.created_at)
    subcategories = await list_owned(db, BudgetSubcategory, user_id, BudgetSubcategory.created_at)
    return BudgetSnapshot(
        categories=[category_from_row(c) for c in categories],
        subcategories=[subcategory_from_row(s) for s in subcategories],
        transactions=await load_entries(db, user_id),
        period=period,
    )


def category_view(category: BudgetCategory, snapshot: BudgetSnapshot) -> dict:
    record = category_from_row(category)
    return {
        "id": category.id,
        "type": category.type,
        "name": category.name,
        "percent": category.percent,
        "amount": category.amount,
        "allocated": snapshot.allocated_for(record),
    }


def subcategory_view(subcategory: BudgetSubcategory, snapshot: BudgetSnapshot) -> dict:
    parent = next(
        (c for c in snapshot.categories if c.id == subcategory.category_id), None
    )
    parent_allocated = snapshot.allocated_for(parent) if parent else 0
    return {
        "id": subcategory.id,
        "category_id": subcategory.category_id,
        "name": subcategory.name,
        "percent": subcategory.percent,
        "amount": subcategory.amount,
        "allocated": allocated_for_subcategory(subcategory_from_row(subcategory), parent_allocated),
    }


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def _check_category_inputs(category_type: str, percent, amount) -> None:
    if category_type == "income":
        if not amount:
            raise InvalidBudgetInputError(
                "amount", "Income categories need an amount greater than 0"
            )
    elif percent is None and amount is None:
        raise InvalidBudgetInputError(
            "percent", "Expense categories need a percent or an amount"
        )


def _guard_category(
    snapshot: BudgetSnapshot,
    proposed: CategoryRecord,
    editing_id: uuid.UUID | None = None,
) -> None:
    overflow = expense_allocation_overflow(snapshot, proposed, editing_id)
    if overflow:
        income = snapshot.total_income
        logger.warning(
            "Rejected category '%s': allocations would exceed income by %d",
            proposed.name, overflow,
        )
        raise OverAllocationError(
            allocated=income + overflow,
            limit=income,
            detail=f"Expense allocations would exceed total income by {overflow}",
        )


def _guard_subcategory(
    snapshot: BudgetSnapshot,
    parent: CategoryRecord,
    proposed: SubcategoryRecord,
    editing_id: uuid.UUID | None = None,
) -> None:
    overflow = subcategory_allocation_overflow(snapshot, parent, proposed, editing_id)
    if overflow:
        siblings = [
            s for s in snapshot.subcategories_of(parent.id)
            if editing_id is None or s.id != editing_id
        ]
        limit = allocated_for_category(parent, snapshot.total_income, siblings + [proposed])
        logger.warning(
            "Rejected subcategory '%s': '%s' would be over-allocated by %d",
            proposed.name, parent.name, overflow,
        )
        raise OverAllocationError(
            allocated=limit + overflow,
            limit=limit,
            detail=f"Subcategories of '{parent.name}' would exceed its allocation by {overflow}",
        )


async def _expense_parent(db: AsyncSession, category_id: uuid.UUID, user_id: uuid.UUID) -> BudgetCategory:
    parent = await get_reference(db, BudgetCategory, category_id, user_id, "category_id", "category")
    if parent.type != "expense":
        raise InvalidReferenceError(
            "category_id", "Subcategories can only be added to expense categories"
        )
    return parent


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

async def create_category(db: AsyncSession, user_id: uuid.UUID, body) -> dict:
    """
    Create an income or expense category.

    Raises:
        InvalidBudgetInputError: If the category lacks the inputs its type needs.
        OverAllocationError: If an expense category would push total
            allocation past total income.
    """
    _check_category_inputs(body.type, body.percent, body.amount)
    snapshot = await load_snapshot(db, user_id)
    proposed = CategoryRecord(
        id=None, type=body.type, name=body.name, percent=body.percent, amount=body.amount
    )
    _guard_category(snapshot, proposed)

    category = BudgetCategory(
        user_id=user_id,
        type=body.type,
        name=body.name.strip(),
        percent=body.percent,
        amount=body.amount,
    )
    db.add(category)
    await db.flush()

    logger.info("Created %s category %s for user %s", category.type, category.id, user_id)
    record_change(db, "budget_categories", INSERT, category.id, user_id)
    return category_view(category, await load_snapshot(db, user_id))


async def list_categories(
    db: AsyncSession,
    user_id: uuid.UUID,
    category_type: str | None = None,
) -> list[dict]:
    snapshot = await load_snapshot(db, user_id)
    categories = await list_owned(db, BudgetCategory, user_id, BudgetCategory.created_at)
    return [
        category_view(c, snapshot)
        for c in categories
        if category_type is None or c.type == category_type
    ]


async def update_category(
    db: AsyncSession,
    category_id: uuid.UUID,
    user_id: uuid.UUID,
    changes: dict,
) -> dict:
    """
    Apply a partial update. `changes` holds only the fields the client sent,
    so an explicit null clears percent or amount.
    """
    category = await get_owned(db, BudgetCategory, category_id, user_id, "category")
    name = changes.get("name") or category.name
    percent = changes["percent"] if "percent" in changes else category.percent
    amount = changes["amount"] if "amount" in changes else category.amount
    if category.type == "income":
        percent = None

    _check_category_inputs(category.type, percent, amount)
    snapshot = await load_snapshot(db, user_id)
    proposed = CategoryRecord(
        id=category.id, type=category.type, name=name, percent=percent, amount=amount
    )
    _guard_category(snapshot, proposed, editing_id=category.id)

    category.name = name.strip()
    category.percent = percent
    category.amount = amount
    await db.flush()

    logger.info("Updated category %s for user %s", category.id, user_id)
    record_change(db, "budget_categories", UPDATE, category.id, user_id)
    return category_view(category, await load_snapshot(db, user_id))


async def delete_category(db: AsyncSession, category_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """
    Delete a category together with its subcategories. Transactions that
    were tagged with them stay, uncategorised.
    """
    category = await get_owned(db, BudgetCategory, category_id, user_id, "category")
    subcategories = await list_owned(db, BudgetSubcategory, user_id)
    sub_ids = [s.id for s in subcategories if s.category_id == category_id]

    await db.execute(
        update(Transaction)
        .where(Transaction.user_id == user_id, Transaction.category_id == category_id)
        .values(category_id=None, subcategory_id=None)
    )
    if sub_ids:
        await db.execute(
            update(Transaction)
            .where(Transaction.user_id == user_id, Transaction.subcategory_id.in_(sub_ids))
            .values(subcategory_id=None)
        )
        await db.execute(delete(BudgetSubcategory).where(BudgetSubcategory.id.in_(sub_ids)))
    await db.delete(category)
    await db.flush()

    logger.info(
        "Deleted category %s (%d subcategories) for user %s", category_id, len(sub_ids), user_id
    )
    for sub_id in sub_ids:
        record_change(db, "budget_subcategories", DELETE, sub_id, user_id)
    record_change(db, "budget_categories", DELETE, category_id, user_id)


# ---------------------------------------------------------------------------
# Subcategories
# ---------------------------------------------------------------------------

async def create_subcategory(db: AsyncSession, user_id: uuid.UUID, body) -> dict:
    """
    Create a subcategory under one of the user's expense categories.

    Raises:
        InvalidReferenceError: If the parent is missing, foreign or an
            income category.
        OverAllocationError: If the parent would be over-allocated.
    """
    parent = await _expense_parent(db, body.category_id, user_id)
    snapshot = await load_snapshot(db, user_id)
    proposed = SubcategoryRecord(
        id=None, category_id=parent.id, name=body.name, percent=body.percent, amount=body.amount
    )
    _guard_subcategory(snapshot, category_from_row(parent), proposed)

    subcategory = BudgetSubcategory(
        user_id=user_id,
        category_id=parent.id,
        name=body.name.strip(),
        percent=body.percent,
        amount=body.amount,
    )
    db.add(subcategory)
    await db.flush()

    logger.info("Created subcategory %s under %s for user %s", subcategory.id, parent.id, user_id)
    record_change(db, "budget_subcategories", INSERT, subcategory.id, user_id)
    return subcategory_view(subcategory, await load_snapshot(db, user_id))


async def list_subcategories(
    db: AsyncSession,
    user_id: uuid.UUID,
    category_id: uuid.UUID | None = None,
) -> list[dict]:
    snapshot = await load_snapshot(db, user_id)
    subcategories = await list_owned(db, BudgetSubcategory, user_id, BudgetSubcategory.created_at)
    return [
        subcategory_view(s, snapshot)
        for s in subcategories
        if category_id is None or s.category_id == category_id
    ]


async def update_subcategory(
    db: AsyncSession,
    subcategory_id: uuid.UUID,
    user_id: uuid.UUID,
    changes: dict,
) -> dict:
    subcategory = await get_owned(db, BudgetSubcategory, subcategory_id, user_id, "subcategory")
    name = changes.get("name") or subcategory.name
    percent = changes["percent"] if "percent" in changes else subcategory.percent
    amount = changes["amount"] if "amount" in changes else subcategory.amount
    if percent is None and amount is None:
        raise InvalidBudgetInputError("percent", "Subcategories need a percent or an amount")

    parent = await get_owned(db, BudgetCategory, subcategory.category_id, user_id, "category")
    snapshot = await load_snapshot(db, user_id)
    proposed = SubcategoryRecord(
        id=subcategory.id, category_id=parent.id, name=name, percent=percent, amount=amount
    )
    _guard_subcategory(snapshot, category_from_row(parent), proposed, editing_id=subcategory.id)

    subcategory.name = name.strip()
    subcategory.percent = percent
    subcategory.amount = amount
    await db.flush()

    logger.info("Updated subcategory %s for user %s", subcategory.id, user_id)
    record_change(db, "budget_subcategories", UPDATE, subcategory.id, user_id)
    return subcategory_view(subcategory, await load_snapshot(db, user_id))


async def delete_subcategory(db: AsyncSession, subcategory_id: uuid.UUID, user_id: uuid.UUID) -> None:
    subcategory = await get_owned(db, BudgetSubcategory, subcategory_id, user_id, "subcategory")
    await db.execute(
        update(Transaction)
        .where(Transaction.user_id == user_id, Transaction.subcategory_id == subcategory_id)
        .values(subcategory_id=None)
    )
    await db.delete(subcategory)
    await db.flush()

    logger.info("Deleted subcategory %s for user %s", subcategory_id, user_id)
    record_change(db, "budget_subcategories", DELETE, subcategory_id, user_id)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

async def budget_summary(db: AsyncSession, user_id: uuid.UUID, period: Period) -> dict:
    """Allocated vs. spent for every category, with spending limited to `period`."""
    snapshot = await load_snapshot(db, user_id, period)
    report = asdict(snapshot.report())
    del report["period"]
    return {"year": period.year, "month": period.month, **report}
