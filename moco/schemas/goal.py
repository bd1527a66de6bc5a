"""Pydantic schemas for savings goal endpoints."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from moco.schemas.common import Amount, SavingFrequency


Priority = Literal["low", "medium", "high"]


class GoalCreateRequest(BaseModel):
    """Request body for POST /goals."""
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
    target_amount: Amount = Field(gt=0)
    saving_amount: Amount = Field(0, ge=0)
    saving_frequency: SavingFrequency = "monthly"
    priority: Priority = "medium"
    wallet_id: uuid.UUID


class GoalUpdateRequest(BaseModel):
    """Request body for PATCH /goals/{id}. Omitted fields are unchanged."""
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
    target_amount: Amount | None = Field(None, gt=0)
    saving_amount: Amount | None = Field(None, ge=0)
    saving_frequency: SavingFrequency | None = None
    priority: Priority | None = None
    wallet_id: uuid.UUID | None = None


class GoalResponse(BaseModel):
    """A goal together with its progress, derived from the linked wallet."""
    id: uuid.UUID
    name: str
    description: str | None
    target_amount: int
    saving_amount: int
    saving_frequency: str
    priority: str
    wallet_id: uuid.UUID
    created_at: datetime
    saved: int
    saved_display: str
    target_display: str
    percent: int
    eta_periods: int | None
    eta_label: str | None
    unit_label: str
