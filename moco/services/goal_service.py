"""
Goal service: savings goals and their derived progress.

A goal is funded by exactly one wallet. The amount saved is that wallet's
balance under the normal wallet rules (incomes and incoming transfers
add, expenses and outgoing transfers subtract), so money moved into a
dedicated savings wallet shows up as progress immediately.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.goals import compute_goal_progress
from moco.calculators.snapshots import Entry, goal_from_row
from moco.config import settings
from moco.events import DELETE, INSERT, UPDATE, record_change
from moco.models.goal import Goal
from moco.models.wallet import Wallet
from moco.services.queries import display_amount, get_owned, get_reference, list_owned, load_entries


logger = logging.getLogger(__name__)

_EDITABLE = (
    "name",
    "description",
    "target_amount",
    "saving_amount",
    "saving_frequency",
    "priority",
    "wallet_id",
)


def goal_view(goal: Goal, entries: list[Entry]) -> dict:
    progress = compute_goal_progress(goal_from_row(goal), entries, locale=settings.LOCALE)
    return {
        "id": goal.id,
        "name": goal.name,
        "description": goal.description,
        "target_amount": goal.target_amount,
        "saving_amount": goal.saving_amount,
        "saving_frequency": goal.saving_frequency,
        "priority": goal.priority,
        "wallet_id": goal.wallet_id,
        "created_at": goal.created_at,
        "saved": progress.saved,
        "saved_display": display_amount(progress.saved),
        "target_display": display_amount(goal.target_amount),
        "percent": progress.percent,
        "eta_periods": progress.eta_periods,
        "eta_label": progress.eta_label,
        "unit_label": progress.unit_label,
    }


async def create_goal(db: AsyncSession, user_id: uuid.UUID, body) -> dict:
    """
    Create a savings goal.

    Raises:
        InvalidReferenceError: If the wallet is missing or not the user's.
    """
    await get_reference(db, Wallet, body.wallet_id, user_id, "wallet_id", "wallet")
    goal = Goal(
        user_id=user_id,
        name=body.name.strip(),
        description=body.description,
        target_amount=body.target_amount,
        saving_amount=body.saving_amount,
        saving_frequency=body.saving_frequency,
        priority=body.priority,
        wallet_id=body.wallet_id,
    )
    db.add(goal)
    await db.flush()

    logger.info("Created goal %s for user %s", goal.id, user_id)
    record_change(db, "goals", INSERT, goal.id, user_id)
    return goal_view(goal, await load_entries(db, user_id))


async def list_goals(db: AsyncSession, user_id: uuid.UUID, limit: int | None = None) -> list[dict]:
    """The user's goals, newest first, each with its progress."""
    goals = await list_owned(db, Goal, user_id, Goal.created_at.desc())
    if limit is not None:
        goals = goals[:limit]
    entries = await load_entries(db, user_id)
    return [goal_view(g, entries) for g in goals]


async def get_goal(db: AsyncSession, goal_id: uuid.UUID, user_id: uuid.UUID) -> dict:
    goal = await get_owned(db, Goal, goal_id, user_id, "goal")
    return goal_view(goal, await load_entries(db, user_id))


async def update_goal(
    db: AsyncSession,
    goal_id: uuid.UUID,
    user_id: uuid.UUID,
    changes: dict,
) -> dict:
    goal = await get_owned(db, Goal, goal_id, user_id, "goal")
    if changes.get("wallet_id") is not None:
        await get_reference(db, Wallet, changes["wallet_id"], user_id, "wallet_id", "wallet")

    for name in _EDITABLE:
        # description is the only field that may be cleared
        if name in changes and (changes[name] is not None or name == "description"):
            setattr(goal, name, changes[name])
    await db.flush()

    logger.info("Updated goal %s for user %s", goal.id, user_id)
    record_change(db, "goals", UPDATE, goal.id, user_id)
    return goal_view(goal, await load_entries(db, user_id))


async def delete_goal(db: AsyncSession, goal_id: uuid.UUID, user_id: uuid.UUID) -> None:
    goal = await get_owned(db, Goal, goal_id, user_id, "goal")
    await db.delete(goal)
    await db.flush()

    logger.info("Deleted goal %s for user %s", goal_id, user_id)
    record_change(db, "goals", DELETE, goal_id, user_id)
