"""Pydantic schema for the dashboard endpoint."""

from pydantic import BaseModel

from moco.schemas.budget import CategoryBudgetResponse
from moco.schemas.goal import GoalResponse


class DashboardResponse(BaseModel):
    """Month overview: balances, cash flow, budget usage and top goals."""
    year: int
    month: int
    total_balance: int
    total_balance_display: str
    income_total: int
    expense_total: int
    budgets: list[CategoryBudgetResponse]
    goals: list[GoalResponse]
