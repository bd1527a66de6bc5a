"""
Dashboard router.

    GET /dashboard?year=&month=  Month overview
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.snapshots import Period
from moco.database import get_db
from moco.dependencies import current_period, get_current_user
from moco.models.user import User
from moco.schemas.dashboard import DashboardResponse
from moco.services import dashboard_service

router = APIRouter()


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Month overview",
)
async def get_dashboard(
    period: Period = Depends(current_period),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Total balance across all wallets, the month's income and expense, budget
    usage per expense category and the three newest goals.
    """
    return await dashboard_service.get_dashboard(db, user.id, period)
