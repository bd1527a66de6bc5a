"""
Budget router: categories, subcategories and the monthly summary.

    POST   /budget/categories                      Create a category
    GET    /budget/categories?type=                List categories with allocations
    PATCH  /budget/categories/{category_id}        Update a category
    DELETE /budget/categories/{category_id}        Delete a category and its subcategories
    POST   /budget/subcategories                   Create a subcategory
    GET    /budget/subcategories?category_id=      List subcategories with allocations
    PATCH  /budget/subcategories/{subcategory_id}  Update a subcategory
    DELETE /budget/subcategories/{subcategory_id}  Delete a subcategory
    GET    /budget/summary?year=&month=            Allocated vs. spent report

Creating or updating a category or subcategory returns 422
(over_allocation) when it would allocate more than is available.
"""

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.snapshots import Period
from moco.database import get_db
from moco.dependencies import current_period, get_current_user
from moco.models.user import User
from moco.schemas.budget import (
    BudgetSummaryResponse,
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    SubcategoryCreateRequest,
    SubcategoryResponse,
    SubcategoryUpdateRequest,
)
from moco.services import budget_service

router = APIRouter()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a budget category",
)
async def create_category(
    request: CategoryCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    - **type**: "income" (needs **amount** > 0) or "expense"
    - expense: **percent** of total income and/or a fixed **amount**;
      percent wins when both are given
    """
    return await budget_service.create_category(db, user.id, request)


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    summary="List budget categories",
)
async def list_categories(
    category_type: Literal["income", "expense"] | None = Query(None, alias="type"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await budget_service.list_categories(db, user.id, category_type)


@router.patch(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Update a budget category",
)
async def update_category(
    category_id: uuid.UUID,
    request: CategoryUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await budget_service.update_category(
        db, category_id, user.id, request.model_dump(exclude_unset=True)
    )


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a budget category",
)
async def delete_category(
    category_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Its subcategories go too; transactions that used them become uncategorised."""
    await budget_service.delete_category(db, category_id, user.id)


# ---------------------------------------------------------------------------
# Subcategories
# ---------------------------------------------------------------------------

@router.post(
    "/subcategories",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a budget subcategory",
)
async def create_subcategory(
    request: SubcategoryCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """**percent** is a share of the parent category's allocation."""
    return await budget_service.create_subcategory(db, user.id, request)


@router.get(
    "/subcategories",
    response_model=list[SubcategoryResponse],
    summary="List budget subcategories",
)
async def list_subcategories(
    category_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await budget_service.list_subcategories(db, user.id, category_id)


@router.patch(
    "/subcategories/{subcategory_id}",
    response_model=SubcategoryResponse,
    summary="Update a budget subcategory",
)
async def update_subcategory(
    subcategory_id: uuid.UUID,
    request: SubcategoryUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await budget_service.update_subcategory(
        db, subcategory_id, user.id, request.model_dump(exclude_unset=True)
    )


@router.delete(
    "/subcategories/{subcategory_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a budget subcategory",
)
async def delete_subcategory(
    subcategory_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await budget_service.delete_subcategory(db, subcategory_id, user.id)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

@router.get(
    "/summary",
    response_model=BudgetSummaryResponse,
    summary="Budget report for a month",
)
async def budget_summary(
    period: Period = Depends(current_period),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Allocations for every category and subcategory, with the spending
    booked against them in the requested month (default: the current one).
    """
    return await budget_service.budget_summary(db, user.id, period)
