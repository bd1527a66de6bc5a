"""Pydantic schemas for wallet endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class WalletCreateRequest(BaseModel):
    """Request body for POST /wallets."""
    name: str = Field(min_length=1, max_length=100)
    type: str = Field("default", min_length=1, max_length=30)


class WalletUpdateRequest(BaseModel):
    """Request body for PATCH /wallets/{id}. Omitted fields are unchanged."""
    name: str | None = Field(None, min_length=1, max_length=100)
    type: str | None = Field(None, min_length=1, max_length=30)


class WalletResponse(BaseModel):
    """A wallet with its balance derived from the transaction history."""
    id: uuid.UUID
    name: str
    type: str
    balance: int
    balance_display: str
    created_at: datetime


class WalletListResponse(BaseModel):
    items: list[WalletResponse]
    total_balance: int
    total_balance_display: str
