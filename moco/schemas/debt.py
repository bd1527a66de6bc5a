"""
Pydantic schemas for debt/loan endpoints.

`type` is "hutang" (the user owes someone) or "piutang" (someone owes the
user). Remaining balance and paid/unpaid status only ever appear in
responses; they are recomputed from the payments on every read.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from moco.schemas.common import Amount, DebtType


class DebtCreateRequest(BaseModel):
    """Request body for POST /debts."""
    type: DebtType
    name: str = Field(min_length=1, max_length=100)
    amount: Amount = Field(gt=0)
    due_date: date | None = None
    wallet_id: uuid.UUID | None = None
    note: str | None = Field(None, max_length=255)


class DebtUpdateRequest(BaseModel):
    """Request body for PATCH /debts/{id}. Omitted fields are unchanged."""
    type: DebtType | None = None
    name: str | None = Field(None, min_length=1, max_length=100)
    amount: Amount | None = Field(None, gt=0)
    due_date: date | None = None
    wallet_id: uuid.UUID | None = None
    note: str | None = Field(None, max_length=255)


class DebtOrderRequest(BaseModel):
    """Request body for PUT /debts/order: debt ids in their new display order."""
    ids: list[uuid.UUID] = Field(min_length=1)


def _not_in_future(value: datetime) -> datetime:
    aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if aware > datetime.now(timezone.utc):
        raise ValueError("Payment date cannot be in the future")
    return aware


PaidAt = Annotated[datetime, AfterValidator(_not_in_future)]


class PaymentCreateRequest(BaseModel):
    """Request body for POST /debts/{id}/payments."""
    amount: Amount = Field(gt=0)
    wallet_id: uuid.UUID | None = None
    note: str | None = Field(None, max_length=255)
    # Defaults to "now" when omitted
    paid_at: PaidAt | None = None


class PaymentUpdateRequest(BaseModel):
    """Request body for PATCH /debts/{id}/payments/{payment_id}."""
    amount: Amount | None = Field(None, gt=0)
    wallet_id: uuid.UUID | None = None
    note: str | None = Field(None, max_length=255)
    paid_at: PaidAt | None = None


class PaymentResponse(BaseModel):
    id: uuid.UUID
    debt_id: uuid.UUID
    amount: int
    wallet_id: uuid.UUID | None
    note: str | None
    paid_at: datetime

    model_config = {"from_attributes": True}


class DebtResponse(BaseModel):
    """A debt with its status derived from the full payment collection."""
    id: uuid.UUID
    type: str
    name: str
    amount: int
    due_date: date | None
    wallet_id: uuid.UUID | None
    note: str | None
    order_index: int
    created_at: datetime
    total_paid: int
    remaining: int
    status: str
    payments: list[PaymentResponse]


class DebtSummaryResponse(BaseModel):
    payable_total: int
    receivable_total: int
    payable_outstanding: int
    receivable_outstanding: int

    model_config = {"from_attributes": True}
