"""
Transactions router.

    POST   /transactions                    Record an income, expense or transfer
    GET    /transactions                    One month, grouped by date, with totals
    GET    /transactions/{transaction_id}   Get one transaction
    PUT    /transactions/{transaction_id}   Replace a transaction
    DELETE /transactions/{transaction_id}   Delete a transaction

The request body is discriminated by its `type` field; see
moco.schemas.transaction for the three shapes.
"""

import uuid

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.snapshots import Period
from moco.database import get_db
from moco.dependencies import current_period, get_current_user
from moco.models.user import User
from moco.schemas.transaction import (
    TransactionListResponse,
    TransactionRequest,
    TransactionResponse,
)
from moco.services import transaction_service

router = APIRouter()


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
)
async def create_transaction(
    request: TransactionRequest = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Record an income, expense or transfer.

    - **amount**: Positive whole amount; "1.500.000" style strings are accepted
    - **date**: Defaults to today
    - income/expense: **wallet_id** required, **category_id** optional
    - expense: **subcategory_id** optional (must belong to the category)
    - transfer: **transfer_from** and **transfer_to_id**, different wallets
    """
    return await transaction_service.create_transaction(db, user.id, request)


@router.get(
    "",
    response_model=TransactionListResponse,
    summary="List a month of transactions",
)
async def list_transactions(
    period: Period = Depends(current_period),
    search: str | None = Query(None, max_length=100),
    wallet_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List one month (default: the current one), newest first.

    - **search**: Matches the note and category, subcategory and wallet names
    - **wallet_id**: Only transactions touching this wallet
    """
    return await transaction_service.list_transactions(
        db, user.id, period, search=search, wallet_id=wallet_id
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
)
async def get_transaction(
    transaction_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await transaction_service.get_transaction(db, transaction_id, user.id)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Replace a transaction",
)
async def replace_transaction(
    transaction_id: uuid.UUID,
    request: TransactionRequest = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The full new body is required; the type may change."""
    return await transaction_service.replace_transaction(db, transaction_id, user.id, request)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await transaction_service.delete_transaction(db, transaction_id, user.id)
