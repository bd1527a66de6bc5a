"""
Pydantic schemas for budget endpoints.

Requests carry only the user's inputs (percent and/or amount). Responses
add the allocated and spent figures computed by `moco.calculators.budget`;
none of those are stored.
"""

import uuid
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from moco.schemas.common import Amount, Percent


class CategoryCreateRequest(BaseModel):
    """Request body for POST /budget/categories."""
    type: Literal["income", "expense"] = "expense"
    name: str = Field(min_length=1, max_length=100)
    percent: Percent | None = None
    amount: Amount | None = Field(None, ge=0)

    @model_validator(mode="after")
    def inputs_match_type(self):
        if self.type == "income":
            if not self.amount:
                raise ValueError("Income categories need an amount greater than 0")
            if self.percent is not None:
                raise ValueError("Income categories cannot be a percent")
        elif self.percent is None and self.amount is None:
            raise ValueError("Expense categories need a percent or an amount")
        return self


class CategoryUpdateRequest(BaseModel):
    """
    Request body for PATCH /budget/categories/{id}.

    Omitted fields are unchanged; send `null` to clear percent or amount.
    The category type cannot change.
    """
    name: str | None = Field(None, min_length=1, max_length=100)
    percent: Percent | None = None
    amount: Amount | None = Field(None, ge=0)


class SubcategoryCreateRequest(BaseModel):
    """Request body for POST /budget/subcategories."""
    category_id: uuid.UUID
    name: str = Field(min_length=1, max_length=100)
    percent: Percent | None = None
    amount: Amount | None = Field(None, ge=0)

    @model_validator(mode="after")
    def percent_or_amount(self):
        if self.percent is None and self.amount is None:
            raise ValueError("Subcategories need a percent or an amount")
        return self


class SubcategoryUpdateRequest(BaseModel):
    """Request body for PATCH /budget/subcategories/{id}."""
    name: str | None = Field(None, min_length=1, max_length=100)
    percent: Percent | None = None
    amount: Amount | None = Field(None, ge=0)


class CategoryResponse(BaseModel):
    id: uuid.UUID
    type: str
    name: str
    percent: float | None
    amount: int | None
    allocated: int


class SubcategoryResponse(BaseModel):
    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    percent: float | None
    amount: int | None
    allocated: int


# ---------------------------------------------------------------------------
# Budget summary
# ---------------------------------------------------------------------------

class SubcategoryBudgetResponse(BaseModel):
    id: uuid.UUID
    name: str
    percent: float | None
    amount: int | None
    allocated: int
    spent: int
    percent_used: int

    model_config = {"from_attributes": True}


class CategoryBudgetResponse(BaseModel):
    id: uuid.UUID
    name: str
    percent: float | None
    amount: int | None
    allocated: int
    spent: int
    percent_used: int
    percent_display: float | None
    sub_allocated_total: int
    is_full: bool
    subcategories: list[SubcategoryBudgetResponse]

    model_config = {"from_attributes": True}


class IncomeLineResponse(BaseModel):
    id: uuid.UUID
    name: str
    amount: int

    model_config = {"from_attributes": True}


class BudgetSummaryResponse(BaseModel):
    year: int
    month: int
    total_income: int
    total_allocated: int
    unallocated_income: int
    total_spent: int
    income: list[IncomeLineResponse]
    categories: list[CategoryBudgetResponse]
