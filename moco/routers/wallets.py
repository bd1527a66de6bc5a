"""
Wallets router.

    POST   /wallets              Create a wallet
    GET    /wallets              List wallets with balances and their total
    GET    /wallets/{wallet_id}  Get one wallet with its balance
    PATCH  /wallets/{wallet_id}  Rename / retype a wallet
    DELETE /wallets/{wallet_id}  Delete an unused wallet

Balances in every response are derived from the transaction history at
request time.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.database import get_db
from moco.dependencies import get_current_user
from moco.models.user import User
from moco.schemas.wallet import (
    WalletCreateRequest,
    WalletListResponse,
    WalletResponse,
    WalletUpdateRequest,
)
from moco.services import wallet_service

router = APIRouter()


@router.post(
    "",
    response_model=WalletResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a wallet",
)
async def create_wallet(
    request: WalletCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await wallet_service.create_wallet(db, user.id, request.name, request.type)


@router.get(
    "",
    response_model=WalletListResponse,
    summary="List your wallets",
)
async def list_wallets(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List all wallets owned by the authenticated user, ordered by name."""
    return await wallet_service.list_wallets(db, user.id)


@router.get(
    "/{wallet_id}",
    response_model=WalletResponse,
    summary="Get a wallet",
)
async def get_wallet(
    wallet_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Returns 403 if the wallet belongs to a different user, or 404 if it
    doesn't exist.
    """
    return await wallet_service.get_wallet(db, wallet_id, user.id)


@router.patch(
    "/{wallet_id}",
    response_model=WalletResponse,
    summary="Update a wallet",
)
async def update_wallet(
    wallet_id: uuid.UUID,
    request: WalletUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await wallet_service.update_wallet(
        db, wallet_id, user.id, request.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{wallet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a wallet",
)
async def delete_wallet(
    wallet_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Returns 409 while transactions or goals still use the wallet."""
    await wallet_service.delete_wallet(db, wallet_id, user.id)
