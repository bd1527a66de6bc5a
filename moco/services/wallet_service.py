"""
Wallet service: wallet CRUD and derived balances.

Balances are not stored. Every read loads the user's full transaction
history and runs `compute_wallet_balances` over it, so a wallet's balance
is always exactly the sum of its incomes, expenses and transfers.

Deleting a wallet:
  A wallet that transactions or goals still point at cannot be deleted
  (ResourceInUseError). Debts and debt payments only reference a wallet
  informationally; their link is cleared instead.
"""

import logging
import uuid

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.wallets import compute_wallet_balances
from moco.events import DELETE, INSERT, UPDATE, record_change
from moco.exceptions import ResourceInUseError
from moco.models.debt import Debt, DebtPayment
from moco.models.goal import Goal
from moco.models.transaction import Transaction
from moco.models.wallet import Wallet
from moco.services.queries import display_amount, get_owned, list_owned, load_entries


logger = logging.getLogger(__name__)


def wallet_view(wallet: Wallet, balance: int) -> dict:
    return {
        "id": wallet.id,
        "name": wallet.name,
        "type": wallet.type,
        "balance": balance,
        "balance_display": display_amount(balance),
        "created_at": wallet.created_at,
    }


async def create_wallet(
    db: AsyncSession,
    user_id: uuid.UUID,
    name: str,
    wallet_type: str = "default",
) -> dict:
    """Create a wallet. A new wallet always starts with a balance of 0."""
    wallet = Wallet(user_id=user_id, name=name.strip(), type=wallet_type)
    db.add(wallet)
    await db.flush()

    logger.info("Created wallet %s for user %s", wallet.id, user_id)
    record_change(db, "wallets", INSERT, wallet.id, user_id)
    return wallet_view(wallet, 0)


async def list_wallets(db: AsyncSession, user_id: uuid.UUID) -> dict:
    """
    List the user's wallets (ordered by name) with their balances.

    Returns:
        {"items": [...], "total_balance": int, "total_balance_display": str}
    """
    wallets = await list_owned(db, Wallet, user_id, Wallet.name)
    entries = await load_entries(db, user_id)
    balances = compute_wallet_balances(entries, [w.id for w in wallets])
    total = sum(balances.values())
    return {
        "items": [wallet_view(w, balances[w.id]) for w in wallets],
        "total_balance": total,
        "total_balance_display": display_amount(total),
    }


async def get_wallet(db: AsyncSession, wallet_id: uuid.UUID, user_id: uuid.UUID) -> dict:
    """
    Get a single wallet with its balance, verifying ownership.

    Raises:
        ResourceNotFoundError: If the wallet doesn't exist.
        UnauthorizedAccessError: If the wallet belongs to someone else.
    """
    wallet = await get_owned(db, Wallet, wallet_id, user_id, "wallet")
    entries = await load_entries(db, user_id)
    balance = compute_wallet_balances(entries, [wallet.id])[wallet.id]
    return wallet_view(wallet, balance)


async def update_wallet(
    db: AsyncSession,
    wallet_id: uuid.UUID,
    user_id: uuid.UUID,
    changes: dict,
) -> dict:
    wallet = await get_owned(db, Wallet, wallet_id, user_id, "wallet")
    if changes.get("name") is not None:
        wallet.name = changes["name"].strip()
    if changes.get("type") is not None:
        wallet.type = changes["type"]
    await db.flush()

    logger.info("Updated wallet %s for user %s", wallet.id, user_id)
    record_change(db, "wallets", UPDATE, wallet.id, user_id)
    return await get_wallet(db, wallet_id, user_id)


async def delete_wallet(db: AsyncSession, wallet_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """
    Delete a wallet.

    Raises:
        ResourceInUseError: If any transaction or goal still uses the wallet.
    """
    wallet = await get_owned(db, Wallet, wallet_id, user_id, "wallet")

    txn_count = await db.scalar(
        select(func.count()).select_from(Transaction).where(
            or_(
                Transaction.wallet_id == wallet_id,
                Transaction.transfer_from == wallet_id,
                Transaction.transfer_to_id == wallet_id,
            )
        )
    )
    goal_count = await db.scalar(
        select(func.count()).select_from(Goal).where(Goal.wallet_id == wallet_id)
    )
    if txn_count or goal_count:
        raise ResourceInUseError(
            "wallet",
            wallet_id,
            f"Wallet is used by {txn_count} transaction(s) and {goal_count} goal(s)",
        )

    await db.execute(update(Debt).where(Debt.wallet_id == wallet_id).values(wallet_id=None))
    await db.execute(
        update(DebtPayment).where(DebtPayment.wallet_id == wallet_id).values(wallet_id=None)
    )
    await db.delete(wallet)
    await db.flush()

    logger.info("Deleted wallet %s for user %s", wallet_id, user_id)
    record_change(db, "wallets", DELETE, wallet_id, user_id)
