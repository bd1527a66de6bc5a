"""
Query helpers shared by the services.

Ownership enforcement:
  Every lookup takes the authenticated user's id. `get_owned` is used for
  the row named in the URL (404 when it doesn't exist, 403 when it belongs
  to someone else). `get_reference` is used for ids inside a request body
  (a wallet, category or subcategory to attach to); a missing or foreign
  reference is a 422 on that field, so one user can never link their rows
  to another user's.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.formatting import format_currency
from moco.calculators.snapshots import Entry, entries_from_rows
from moco.config import settings
from moco.exceptions import InvalidReferenceError, ResourceNotFoundError, UnauthorizedAccessError
from moco.models.transaction import Transaction


async def get_owned(db: AsyncSession, model, row_id: uuid.UUID, user_id: uuid.UUID, resource: str):
    """
    Fetch a row by primary key and verify it belongs to `user_id`.

    Raises:
        ResourceNotFoundError: If the row doesn't exist.
        UnauthorizedAccessError: If the row belongs to another user.
    """
    row = await db.get(model, row_id)
    if row is None:
        raise ResourceNotFoundError(resource, row_id)
    if row.user_id != user_id:
        raise UnauthorizedAccessError()
    return row


async def get_reference(
    db: AsyncSession,
    model,
    row_id: uuid.UUID | None,
    user_id: uuid.UUID,
    field: str,
    resource: str,
):
    """
    Resolve an id from a request body. None passes through.

    Raises:
        InvalidReferenceError: If the row is missing or not the user's.
    """
    if row_id is None:
        return None
    row = await db.get(model, row_id)
    if row is None or row.user_id != user_id:
        raise InvalidReferenceError(field, f"{resource.capitalize()} {row_id} not found")
    return row


async def list_owned(db: AsyncSession, model, user_id: uuid.UUID, *order_by) -> list:
    result = await db.execute(
        select(model).where(model.user_id == user_id).order_by(*order_by)
    )
    return list(result.scalars().all())


async def load_entries(db: AsyncSession, user_id: uuid.UUID) -> list[Entry]:
    """
    The user's complete transaction history as calculator snapshots.

    Balances are never date-filtered, so this always loads everything;
    budget periods are applied by the calculators themselves.
    """
    rows = await list_owned(db, Transaction, user_id, Transaction.date, Transaction.created_at)
    return entries_from_rows(rows)


def display_amount(value) -> str:
    """Render an amount for display using the configured currency label."""
    return format_currency(
        value,
        label=settings.CURRENCY_LABEL,
        separator=settings.THOUSANDS_SEPARATOR,
    )
