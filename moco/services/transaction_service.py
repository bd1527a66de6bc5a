"""
Transaction service: recording and listing incomes, expenses and transfers.

Writes:
  The request body has already been narrowed to one of the three variants
  (IncomeCreateRequest, ExpenseCreateRequest, TransferCreateRequest) by the
  schema's discriminated union. This module checks that every id in the
  body belongs to the user and fits together:

    - wallets must be the user's
    - an income may only carry an income category, an expense only an
      expense category
    - an expense subcategory must belong to the expense category sent with
      it; when only the subcategory is sent, its parent is filled in

  No balance is touched on write. Balances are derived on read, so
  recording, editing and deleting a transaction are all single-row
  operations.

Listing:
  `list_transactions` returns one calendar month, newest first, optionally
  narrowed by a free-text search (note, category, subcategory and wallet
  names) and by a wallet (matching either side of a transfer). It also
  returns the rows grouped per date and the month's income/expense sums.
"""

import logging
import uuid
from collections import OrderedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.snapshots import Period
from moco.events import DELETE, INSERT, UPDATE, record_change
from moco.exceptions import InvalidReferenceError
from moco.models.budget import BudgetCategory, BudgetSubcategory
from moco.models.transaction import Transaction
from moco.models.wallet import Wallet
from moco.schemas.transaction import ExpenseCreateRequest, TransferCreateRequest
from moco.services.queries import display_amount, get_owned, get_reference, list_owned


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reference checks
# ---------------------------------------------------------------------------

async def _resolve_columns(db: AsyncSession, user_id: uuid.UUID, body) -> dict:
    """
    Validate the ids in a transaction body and return the column values
    for the stored row.

    Raises:
        InvalidReferenceError: For any missing, foreign or mismatched id.
    """
    columns = {
        "type": body.type,
        "amount": body.amount,
        "date": body.date,
        "note": body.note,
        "wallet_id": None,
        "category_id": None,
        "subcategory_id": None,
        "transfer_from": None,
        "transfer_to_id": None,
    }

    if isinstance(body, TransferCreateRequest):
        await get_reference(db, Wallet, body.transfer_from, user_id, "transfer_from", "wallet")
        await get_reference(db, Wallet, body.transfer_to_id, user_id, "transfer_to_id", "wallet")
        columns["transfer_from"] = body.transfer_from
        columns["transfer_to_id"] = body.transfer_to_id
        return columns

    await get_reference(db, Wallet, body.wallet_id, user_id, "wallet_id", "wallet")
    columns["wallet_id"] = body.wallet_id

    category = await get_reference(
        db, BudgetCategory, body.category_id, user_id, "category_id", "category"
    )
    if category is not None and category.type != body.type:
        raise InvalidReferenceError(
            "category_id",
            f"An {body.type} cannot use the {category.type} category '{category.name}'",
        )

    if isinstance(body, ExpenseCreateRequest) and body.subcategory_id is not None:
        subcategory = await get_reference(
            db, BudgetSubcategory, body.subcategory_id, user_id, "subcategory_id", "subcategory"
        )
        if category is None:
            columns["category_id"] = subcategory.category_id
        elif subcategory.category_id != category.id:
            raise InvalidReferenceError(
                "subcategory_id",
                f"Subcategory '{subcategory.name}' does not belong to '{category.name}'",
            )
        columns["subcategory_id"] = subcategory.id

    if category is not None:
        columns["category_id"] = category.id
    return columns


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

class _Names:
    """Display names for the ids a transaction row points at."""

    def __init__(self, wallets, categories, subcategories):
        self.wallets = {w.id: w.name for w in wallets}
        self.categories = {c.id: c.name for c in categories}
        self.subcategories = {s.id: s.name for s in subcategories}

    @classmethod
    async def load(cls, db: AsyncSession, user_id: uuid.UUID) -> "_Names":
        return cls(
            await list_owned(db, Wallet, user_id),
            await list_owned(db, BudgetCategory, user_id),
            await list_owned(db, BudgetSubcategory, user_id),
        )


def transaction_view(txn: Transaction, names: _Names) -> dict:
    return {
        "id": txn.id,
        "type": txn.type,
        "amount": txn.amount,
        "amount_display": display_amount(txn.amount),
        "date": txn.date,
        "note": txn.note,
        "wallet_id": txn.wallet_id,
        "wallet_name": names.wallets.get(txn.wallet_id),
        "category_id": txn.category_id,
        "category_name": names.categories.get(txn.category_id),
        "subcategory_id": txn.subcategory_id,
        "subcategory_name": names.subcategories.get(txn.subcategory_id),
        "transfer_from": txn.transfer_from,
        "transfer_from_name": names.wallets.get(txn.transfer_from),
        "transfer_to_id": txn.transfer_to_id,
        "transfer_to_name": names.wallets.get(txn.transfer_to_id),
        "created_at": txn.created_at,
    }


def _matches_search(view: dict, needle: str) -> bool:
    haystacks = (
        view["note"],
        view["category_name"],
        view["subcategory_name"],
        view["wallet_name"],
        view["transfer_from_name"],
        view["transfer_to_name"],
    )
    return any(needle in text.lower() for text in haystacks if text)


def _matches_wallet(view: dict, wallet_id: uuid.UUID) -> bool:
    return wallet_id in (view["wallet_id"], view["transfer_from"], view["transfer_to_id"])


def group_by_date(views: list[dict]) -> list[dict]:
    """Group already-sorted transaction views into per-date buckets."""
    groups: OrderedDict = OrderedDict()
    for view in views:
        groups.setdefault(view["date"], []).append(view)
    return [{"date": day, "items": items} for day, items in groups.items()]


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

async def create_transaction(db: AsyncSession, user_id: uuid.UUID, body) -> dict:
    """
    Record a new income, expense or transfer.

    Args:
        db: Database session.
        user_id: The authenticated user's ID.
        body: One of the TransactionRequest variants.

    Returns:
        The stored transaction as a response dict.

    Raises:
        InvalidReferenceError: If a wallet, category or subcategory id is
            missing, foreign, or doesn't fit the transaction type.
    """
    columns = await _resolve_columns(db, user_id, body)
    txn = Transaction(user_id=user_id, **columns)
    db.add(txn)
    await db.flush()

    logger.info("Recorded %s %s (%d) for user %s", txn.type, txn.id, txn.amount, user_id)
    record_change(db, "transactions", INSERT, txn.id, user_id)
    return transaction_view(txn, await _Names.load(db, user_id))


async def get_transaction(db: AsyncSession, transaction_id: uuid.UUID, user_id: uuid.UUID) -> dict:
    txn = await get_owned(db, Transaction, transaction_id, user_id, "transaction")
    return transaction_view(txn, await _Names.load(db, user_id))


async def replace_transaction(
    db: AsyncSession,
    transaction_id: uuid.UUID,
    user_id: uuid.UUID,
    body,
) -> dict:
    """
    Overwrite a transaction with a new body. The type may change (an
    expense can become a transfer); columns the new variant doesn't use
    are cleared.
    """
    txn = await get_owned(db, Transaction, transaction_id, user_id, "transaction")
    columns = await _resolve_columns(db, user_id, body)
    for name, value in columns.items():
        setattr(txn, name, value)
    await db.flush()

    logger.info("Updated transaction %s for user %s", txn.id, user_id)
    record_change(db, "transactions", UPDATE, txn.id, user_id)
    return transaction_view(txn, await _Names.load(db, user_id))


async def delete_transaction(db: AsyncSession, transaction_id: uuid.UUID, user_id: uuid.UUID) -> None:
    txn = await get_owned(db, Transaction, transaction_id, user_id, "transaction")
    await db.delete(txn)
    await db.flush()

    logger.info("Deleted transaction %s for user %s", transaction_id, user_id)
    record_change(db, "transactions", DELETE, transaction_id, user_id)


async def list_transactions(
    db: AsyncSession,
    user_id: uuid.UUID,
    period: Period,
    search: str | None = None,
    wallet_id: uuid.UUID | None = None,
) -> dict:
    """
    List one month of transactions, newest first.

    Args:
        period: The calendar month to list.
        search: Case-insensitive substring matched against the note and
            the category, subcategory and wallet names.
        wallet_id: Only rows touching this wallet (either transfer side).

    Returns:
        Dict with items, per-date groups and the income/expense totals of
        the filtered rows. Transfers count toward neither total.
    """
    result = await db.execute(
        select(Transaction)
        .where(
            Transaction.user_id == user_id,
            Transaction.date >= period.start,
            Transaction.date <= period.end,
        )
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
    )
    names = await _Names.load(db, user_id)
    views = [transaction_view(txn, names) for txn in result.scalars().all()]

    needle = (search or "").strip().lower()
    if needle:
        views = [v for v in views if _matches_search(v, needle)]
    if wallet_id is not None:
        views = [v for v in views if _matches_wallet(v, wallet_id)]

    return {
        "year": period.year,
        "month": period.month,
        "items": views,
        "groups": group_by_date(views),
        "income_total": sum(v["amount"] for v in views if v["type"] == "income"),
        "expense_total": sum(v["amount"] for v in views if v["type"] == "expense"),
    }
