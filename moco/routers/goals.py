"""
Goals router.

    POST   /goals            Create a savings goal
    GET    /goals            List goals (newest first) with progress
    GET    /goals/{goal_id}  Get one goal with progress
    PATCH  /goals/{goal_id}  Update a goal
    DELETE /goals/{goal_id}  Delete a goal
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.database import get_db
from moco.dependencies import get_current_user
from moco.models.user import User
from moco.schemas.goal import GoalCreateRequest, GoalResponse, GoalUpdateRequest
from moco.services import goal_service

router = APIRouter()


@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a savings goal",
)
async def create_goal(
    request: GoalCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    - **target_amount**: Must be greater than 0
    - **saving_amount** / **saving_frequency**: The plan used for the ETA
    - **wallet_id**: The wallet whose balance counts as saved
    """
    return await goal_service.create_goal(db, user.id, request)


@router.get(
    "",
    response_model=list[GoalResponse],
    summary="List your goals",
)
async def list_goals(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await goal_service.list_goals(db, user.id)


@router.get(
    "/{goal_id}",
    response_model=GoalResponse,
    summary="Get a goal",
)
async def get_goal(
    goal_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await goal_service.get_goal(db, goal_id, user.id)


@router.patch(
    "/{goal_id}",
    response_model=GoalResponse,
    summary="Update a goal",
)
async def update_goal(
    goal_id: uuid.UUID,
    request: GoalUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await goal_service.update_goal(
        db, goal_id, user.id, request.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a goal",
)
async def delete_goal(
    goal_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await goal_service.delete_goal(db, goal_id, user.id)
