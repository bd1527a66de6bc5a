"""
Debts router: debts (hutang), loans (piutang) and their payments.

    POST   /debts                                  Record a debt or loan
    GET    /debts?type=                            List in display order
    GET    /debts/summary                          Payable/receivable totals
    PUT    /debts/order                            Set the display order
    GET    /debts/{debt_id}                        Get one debt with payments
    PATCH  /debts/{debt_id}                        Update a debt
    DELETE /debts/{debt_id}                        Delete a debt and its payments
    POST   /debts/{debt_id}/payments               Record a payment
    PATCH  /debts/{debt_id}/payments/{payment_id}  Update a payment
    DELETE /debts/{debt_id}/payments/{payment_id}  Delete a payment

Every debt in a response carries total_paid, remaining and status,
recomputed from its payments. Payment endpoints return the parent debt so
the new status is visible immediately.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.database import get_db
from moco.dependencies import get_current_user
from moco.models.user import User
from moco.schemas.common import DebtType
from moco.schemas.debt import (
    DebtCreateRequest,
    DebtOrderRequest,
    DebtResponse,
    DebtSummaryResponse,
    DebtUpdateRequest,
    PaymentCreateRequest,
    PaymentUpdateRequest,
)
from moco.services import debt_service

router = APIRouter()


@router.post(
    "",
    response_model=DebtResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a debt or loan",
)
async def create_debt(
    request: DebtCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    - **type**: "hutang" (you owe) or "piutang" (you are owed)
    - **amount**: The original principal, greater than 0
    """
    return await debt_service.create_debt(db, user.id, request)


@router.get(
    "",
    response_model=list[DebtResponse],
    summary="List debts and loans",
)
async def list_debts(
    debt_type: DebtType | None = Query(None, alias="type"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await debt_service.list_debts(db, user.id, debt_type)


# Fixed paths are declared before /{debt_id} so they aren't parsed as ids

@router.get(
    "/summary",
    response_model=DebtSummaryResponse,
    summary="Debt and loan totals",
)
async def debt_summary(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Principal totals per type, plus what is still outstanding (overpaid
    debts count as 0 outstanding).
    """
    return await debt_service.debt_summary(db, user.id)


@router.put(
    "/order",
    response_model=list[DebtResponse],
    summary="Reorder debts",
)
async def reorder_debts(
    request: DebtOrderRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Send debt ids in their new order; unlisted debts follow after them."""
    return await debt_service.reorder_debts(db, user.id, request.ids)


@router.get(
    "/{debt_id}",
    response_model=DebtResponse,
    summary="Get a debt",
)
async def get_debt(
    debt_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await debt_service.get_debt(db, debt_id, user.id)


@router.patch(
    "/{debt_id}",
    response_model=DebtResponse,
    summary="Update a debt",
)
async def update_debt(
    debt_id: uuid.UUID,
    request: DebtUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await debt_service.update_debt(
        db, debt_id, user.id, request.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{debt_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a debt",
)
async def delete_debt(
    debt_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await debt_service.delete_debt(db, debt_id, user.id)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

@router.post(
    "/{debt_id}/payments",
    response_model=DebtResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
)
async def add_payment(
    debt_id: uuid.UUID,
    request: PaymentCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """**paid_at** defaults to now and may not be in the future."""
    return await debt_service.add_payment(db, debt_id, user.id, request)


@router.patch(
    "/{debt_id}/payments/{payment_id}",
    response_model=DebtResponse,
    summary="Update a payment",
)
async def update_payment(
    debt_id: uuid.UUID,
    payment_id: uuid.UUID,
    request: PaymentUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await debt_service.update_payment(
        db, debt_id, payment_id, user.id, request.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{debt_id}/payments/{payment_id}",
    response_model=DebtResponse,
    summary="Delete a payment",
)
async def delete_payment(
    debt_id: uuid.UUID,
    payment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await debt_service.delete_payment(db, debt_id, payment_id, user.id)
