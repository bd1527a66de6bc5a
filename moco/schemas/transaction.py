"""
Pydantic schemas for transaction endpoints.

The request body is a tagged union discriminated by `type`. Each variant
only declares the fields that make sense for it, so an income with a
subcategory or a transfer with a category is rejected by validation
instead of being stored and silently ignored:

    {"type": "income",   "amount": ..., "wallet_id": ..., "category_id": ...}
    {"type": "expense",  "amount": ..., "wallet_id": ..., "category_id": ...,
                         "subcategory_id": ...}
    {"type": "transfer", "amount": ..., "transfer_from": ..., "transfer_to_id": ...}

Amounts are whole currency units and may be sent as display strings.
"""

import datetime as dt
import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from moco.schemas.common import Amount, today


class _TransactionBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Amount = Field(gt=0, description="Whole currency units (must be positive)")
    date: dt.date = Field(default_factory=today)
    note: str | None = Field(None, max_length=255)


class IncomeCreateRequest(_TransactionBase):
    type: Literal["income"]
    wallet_id: uuid.UUID
    category_id: uuid.UUID | None = None


class ExpenseCreateRequest(_TransactionBase):
    type: Literal["expense"]
    wallet_id: uuid.UUID
    category_id: uuid.UUID | None = None
    subcategory_id: uuid.UUID | None = None


class TransferCreateRequest(_TransactionBase):
    type: Literal["transfer"]
    transfer_from: uuid.UUID
    transfer_to_id: uuid.UUID

    @model_validator(mode="after")
    def wallets_must_differ(self):
        """Cannot transfer money to the same wallet."""
        if self.transfer_from == self.transfer_to_id:
            raise ValueError("Cannot transfer to the same wallet")
        return self


TransactionRequest = Annotated[
    Union[IncomeCreateRequest, ExpenseCreateRequest, TransferCreateRequest],
    Field(discriminator="type"),
]


class TransactionResponse(BaseModel):
    """A stored transaction with the names of the rows it points at."""
    id: uuid.UUID
    type: str
    amount: int
    amount_display: str
    date: dt.date
    note: str | None
    wallet_id: uuid.UUID | None
    wallet_name: str | None = None
    category_id: uuid.UUID | None
    category_name: str | None = None
    subcategory_id: uuid.UUID | None
    subcategory_name: str | None = None
    transfer_from: uuid.UUID | None
    transfer_from_name: str | None = None
    transfer_to_id: uuid.UUID | None
    transfer_to_name: str | None = None
    created_at: dt.datetime


class TransactionGroup(BaseModel):
    """All listed transactions that share one calendar date."""
    date: dt.date
    items: list[TransactionResponse]


class TransactionListResponse(BaseModel):
    year: int
    month: int
    items: list[TransactionResponse]
    groups: list[TransactionGroup]
    income_total: int
    expense_total: int
