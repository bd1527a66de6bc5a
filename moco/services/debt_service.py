"""
Debt service: debts/loans, installment payments, ordering and totals.

Status is never stored. Every response recomputes total paid, remaining
and paid/unpaid from the debt's complete payment collection with
`compute_debt_status`, so adding, editing or deleting a payment is
reflected on the very next read. Overpaying is allowed: remaining goes
negative and the debt reads as paid.

Ordering:
  Debts are listed by `order_index`, the user's manual drag-and-drop
  order. A new debt goes to the end of the list; `reorder_debts` rewrites
  the index of every debt in one call.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.debts import DebtSummary, compute_debt_status, summarize_debts
from moco.calculators.snapshots import debt_from_row, payment_from_row
from moco.events import DELETE, INSERT, UPDATE, record_change
from moco.exceptions import InvalidReferenceError, ResourceNotFoundError
from moco.models.debt import Debt, DebtPayment
from moco.models.wallet import Wallet
from moco.services.queries import get_owned, get_reference, list_owned


logger = logging.getLogger(__name__)

_EDITABLE = ("type", "name", "amount", "due_date", "wallet_id", "note")
_CLEARABLE = {"due_date", "wallet_id", "note"}


def payment_view(payment: DebtPayment) -> dict:
    return {
        "id": payment.id,
        "debt_id": payment.debt_id,
        "amount": payment.amount,
        "wallet_id": payment.wallet_id,
        "note": payment.note,
        "paid_at": payment.paid_at,
    }


def debt_view(debt: Debt, payments: list[DebtPayment]) -> dict:
    """`payments` may span several debts; only this debt's are used."""
    own = [p for p in payments if p.debt_id == debt.id]
    status = compute_debt_status(debt_from_row(debt), [payment_from_row(p) for p in own])
    return {
        "id": debt.id,
        "type": debt.type,
        "name": debt.name,
        "amount": debt.amount,
        "due_date": debt.due_date,
        "wallet_id": debt.wallet_id,
        "note": debt.note,
        "order_index": debt.order_index,
        "created_at": debt.created_at,
        "total_paid": status.total_paid,
        "remaining": status.remaining,
        "status": status.status,
        "payments": [payment_view(p) for p in own],
    }


async def _payments_of(db: AsyncSession, debt_id: uuid.UUID) -> list[DebtPayment]:
    result = await db.execute(
        select(DebtPayment)
        .where(DebtPayment.debt_id == debt_id)
        .order_by(DebtPayment.paid_at)
    )
    return list(result.scalars().all())


async def _debt_response(db: AsyncSession, debt: Debt) -> dict:
    return debt_view(debt, await _payments_of(db, debt.id))


# ---------------------------------------------------------------------------
# Debts
# ---------------------------------------------------------------------------

async def create_debt(db: AsyncSession, user_id: uuid.UUID, body) -> dict:
    """
    Record a new debt (hutang) or loan (piutang) at the end of the list.

    Raises:
        InvalidReferenceError: If the wallet is missing or not the user's.
    """
    await get_reference(db, Wallet, body.wallet_id, user_id, "wallet_id", "wallet")
    count = await db.scalar(
        select(func.count()).select_from(Debt).where(Debt.user_id == user_id)
    )
    debt = Debt(
        user_id=user_id,
        type=body.type,
        name=body.name.strip(),
        amount=body.amount,
        due_date=body.due_date,
        wallet_id=body.wallet_id,
        note=body.note,
        order_index=count or 0,
    )
    db.add(debt)
    await db.flush()

    logger.info("Created %s %s for user %s", debt.type, debt.id, user_id)
    record_change(db, "debts", INSERT, debt.id, user_id)
    return debt_view(debt, [])


async def list_debts(
    db: AsyncSession,
    user_id: uuid.UUID,
    debt_type: str | None = None,
) -> list[dict]:
    """The user's debts in display order, optionally only one type."""
    debts = await list_owned(db, Debt, user_id, Debt.order_index, Debt.created_at)
    if debt_type is not None:
        debts = [d for d in debts if d.type == debt_type]
    payments = await list_owned(db, DebtPayment, user_id, DebtPayment.paid_at)
    return [debt_view(d, payments) for d in debts]


async def get_debt(db: AsyncSession, debt_id: uuid.UUID, user_id: uuid.UUID) -> dict:
    debt = await get_owned(db, Debt, debt_id, user_id, "debt")
    return await _debt_response(db, debt)


async def update_debt(
    db: AsyncSession,
    debt_id: uuid.UUID,
    user_id: uuid.UUID,
    changes: dict,
) -> dict:
    debt = await get_owned(db, Debt, debt_id, user_id, "debt")
    if changes.get("wallet_id") is not None:
        await get_reference(db, Wallet, changes["wallet_id"], user_id, "wallet_id", "wallet")

    for name in _EDITABLE:
        if name in changes and (changes[name] is not None or name in _CLEARABLE):
            setattr(debt, name, changes[name])
    await db.flush()

    logger.info("Updated debt %s for user %s", debt.id, user_id)
    record_change(db, "debts", UPDATE, debt.id, user_id)
    return await _debt_response(db, debt)


async def delete_debt(db: AsyncSession, debt_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """Delete a debt together with all of its payments."""
    debt = await get_owned(db, Debt, debt_id, user_id, "debt")
    await db.execute(delete(DebtPayment).where(DebtPayment.debt_id == debt_id))
    await db.delete(debt)
    await db.flush()

    logger.info("Deleted debt %s for user %s", debt_id, user_id)
    record_change(db, "debts", DELETE, debt_id, user_id)


async def reorder_debts(db: AsyncSession, user_id: uuid.UUID, ids: list[uuid.UUID]) -> list[dict]:
    """
    Set the display order: each listed debt gets its position as
    `order_index`. Debts not in the list keep their place after them.

    Raises:
        InvalidReferenceError: If an id is repeated, unknown or not the user's.
    """
    wanted = set(ids)
    if len(wanted) != len(ids):
        raise InvalidReferenceError("ids", "Each debt may only appear once")

    debts = {d.id: d for d in await list_owned(db, Debt, user_id, Debt.order_index)}
    missing = [str(i) for i in ids if i not in debts]
    if missing:
        raise InvalidReferenceError("ids", f"Debt(s) not found: {', '.join(missing)}")

    rest = [d for d in debts.values() if d.id not in wanted]
    for index, debt in enumerate([debts[i] for i in ids] + rest):
        if debt.order_index != index:
            debt.order_index = index
            record_change(db, "debts", UPDATE, debt.id, user_id)
    await db.flush()

    logger.info("Reordered %d debts for user %s", len(debts), user_id)
    return await list_debts(db, user_id)


async def debt_summary(db: AsyncSession, user_id: uuid.UUID) -> DebtSummary:
    debts = await list_owned(db, Debt, user_id)
    payments = await list_owned(db, DebtPayment, user_id)
    return summarize_debts(
        [debt_from_row(d) for d in debts],
        [payment_from_row(p) for p in payments],
    )


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

async def _owned_payment(
    db: AsyncSession,
    debt: Debt,
    payment_id: uuid.UUID,
    user_id: uuid.UUID,
) -> DebtPayment:
    payment = await get_owned(db, DebtPayment, payment_id, user_id, "payment")
    if payment.debt_id != debt.id:
        raise ResourceNotFoundError("payment", payment_id)
    return payment


async def add_payment(db: AsyncSession, debt_id: uuid.UUID, user_id: uuid.UUID, body) -> dict:
    """
    Record an installment and return the debt with its recomputed status.

    `paid_at` defaults to now; the schema already rejects future dates.
    """
    debt = await get_owned(db, Debt, debt_id, user_id, "debt")
    await get_reference(db, Wallet, body.wallet_id, user_id, "wallet_id", "wallet")
    payment = DebtPayment(
        user_id=user_id,
        debt_id=debt.id,
        amount=body.amount,
        wallet_id=body.wallet_id,
        note=body.note,
        paid_at=body.paid_at or datetime.now(timezone.utc),
    )
    db.add(payment)
    await db.flush()

    logger.info("Recorded payment %s (%d) on debt %s", payment.id, payment.amount, debt.id)
    record_change(db, "debt_payments", INSERT, payment.id, user_id)
    return await _debt_response(db, debt)


async def update_payment(
    db: AsyncSession,
    debt_id: uuid.UUID,
    payment_id: uuid.UUID,
    user_id: uuid.UUID,
    changes: dict,
) -> dict:
    debt = await get_owned(db, Debt, debt_id, user_id, "debt")
    payment = await _owned_payment(db, debt, payment_id, user_id)
    if changes.get("wallet_id") is not None:
        await get_reference(db, Wallet, changes["wallet_id"], user_id, "wallet_id", "wallet")

    for name in ("amount", "wallet_id", "note", "paid_at"):
        if name in changes and (changes[name] is not None or name in ("wallet_id", "note")):
            setattr(payment, name, changes[name])
    await db.flush()

    logger.info("Updated payment %s on debt %s", payment.id, debt.id)
    record_change(db, "debt_payments", UPDATE, payment.id, user_id)
    return await _debt_response(db, debt)


async def delete_payment(
    db: AsyncSession,
    debt_id: uuid.UUID,
    payment_id: uuid.UUID,
    user_id: uuid.UUID,
) -> dict:
    debt = await get_owned(db, Debt, debt_id, user_id, "debt")
    payment = await _owned_payment(db, debt, payment_id, user_id)
    await db.delete(payment)
    await db.flush()

    logger.info("Deleted payment %s on debt %s", payment_id, debt.id)
    record_change(db, "debt_payments", DELETE, payment_id, user_id)
    return await _debt_response(db, debt)
