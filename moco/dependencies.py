"""
FastAPI dependencies shared by the routers.

  get_current_user (JWT -> User)
  current_period   (?year=&month= -> Period)

Every protected endpoint declares `get_current_user` as a parameter. FastAPI
calls the dependency first; if the token is missing, expired or tampered
with, the request is rejected with 401 before the route handler runs.

The returned user's id is the owner key every service filters on, so a
route can only ever see the caller's own rows.
"""

import uuid
from datetime import datetime, timezone

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moco.calculators.snapshots import Period
from moco.database import get_db
from moco.models.user import User
from moco.security import decode_access_token


# OAuth2PasswordBearer tells FastAPI where to look for the token:
# the "Authorization: Bearer <token>" header. The tokenUrl points to
# the login endpoint (used by Swagger UI's "Authorize" button).
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


async def user_from_token(db: AsyncSession, token: str) -> User | None:
    """
    Resolve a JWT to an active User.

    Returns None for anything that doesn't check out (bad signature,
    expired, malformed subject, unknown or deactivated user). Shared by
    the HTTP dependency below and the /changes websocket, which receives
    its token as a query parameter.
    """
    try:
        payload = decode_access_token(token)
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            return None
        user_id = uuid.UUID(user_id_str)
    except (JWTError, ValueError):
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the JWT token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is invalid or the user doesn't exist.
    """
    user = await user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def current_period(
    year: int | None = Query(None, ge=1970, le=9999),
    month: int | None = Query(None, ge=1, le=12),
) -> Period:
    """
    The calendar month a view is computed for. Missing parts default to
    the current UTC year/month.
    """
    this_month = Period.of(datetime.now(timezone.utc).date())
    return Period(year or this_month.year, month or this_month.month)
