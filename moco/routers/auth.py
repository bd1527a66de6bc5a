"""
Auth router: signup and login.

    POST /auth/signup  Register and receive a token
    POST /auth/login   Exchange email + password for a token
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.database import get_db
from moco.schemas.auth import (
    UserSignupRequest,
    UserLoginRequest,
    TokenResponse,
    SignupResponse,
)
from moco.services import auth_service

router = APIRouter()


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def signup(
    request: UserSignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new user. Returns a JWT token so the user is immediately
    logged in after signup.

    - **email**: Must be a valid email format and not already registered
    - **password**: Minimum 8 characters
    - **display_name**: Optional
    """
    user, token = await auth_service.signup(
        db=db,
        email=request.email,
        password=request.password,
        display_name=request.display_name,
    )

    return SignupResponse(
        user_id=user.id,
        email=user.email,
        display_name=user.display_name,
        token=token,
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and get a token",
)
async def login(
    request: UserLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with email and password.

    Returns a JWT bearer token that must be included in the Authorization
    header for all subsequent requests:

        Authorization: Bearer <token>
    """
    _, token = await auth_service.login(
        db=db,
        email=request.email,
        password=request.password,
    )
    return TokenResponse(token=token)
