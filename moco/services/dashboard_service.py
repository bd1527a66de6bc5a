"""
Dashboard service: the one-screen month overview.

Combines the other calculators over a single load of the user's rows:
total balance across wallets, the month's income and expense totals,
per-category budget usage for the month and the three newest goals.
"""

import uuid
from dataclasses import asdict

from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.snapshots import ExpenseEntry, IncomeEntry, Period
from moco.calculators.wallets import total_balance
from moco.models.goal import Goal
from moco.models.wallet import Wallet
from moco.services.budget_service import load_snapshot
from moco.services.goal_service import goal_view
from moco.services.queries import display_amount, list_owned


GOAL_PREVIEW_COUNT = 3


async def get_dashboard(db: AsyncSession, user_id: uuid.UUID, period: Period) -> dict:
    snapshot = await load_snapshot(db, user_id, period)
    entries = list(snapshot.transactions)

    wallets = await list_owned(db, Wallet, user_id)
    balance = total_balance(entries, [w.id for w in wallets])

    in_month = [e for e in entries if period.contains(e.date)]
    goals = await list_owned(db, Goal, user_id, Goal.created_at.desc())

    return {
        "year": period.year,
        "month": period.month,
        "total_balance": balance,
        "total_balance_display": display_amount(balance),
        "income_total": sum(e.amount for e in in_month if isinstance(e, IncomeEntry)),
        "expense_total": sum(e.amount for e in in_month if isinstance(e, ExpenseEntry)),
        "budgets": [asdict(snapshot.category_budget(c)) for c in snapshot.expense_categories],
        "goals": [goal_view(g, entries) for g in goals[:GOAL_PREVIEW_COUNT]],
    }
