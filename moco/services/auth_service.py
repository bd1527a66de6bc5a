"""
Authentication service: signup and login business logic.

This module contains the core auth logic, separated from HTTP concerns.
The router calls these functions and translates the results into HTTP
responses.

Signup flow:
  1. Check if email is already registered
  2. Hash the password with Argon2id
  3. Create the User
  4. Return a JWT token so the user is immediately logged in

Login flow:
  1. Look up user by email
  2. Verify password against stored hash
  3. Return a JWT token

Login returns the same error for "wrong password", "email not found" and
"account deactivated" so the endpoint can't be used to enumerate emails.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moco.exceptions import DuplicateEmailError, InvalidCredentialsError
from moco.models.user import User
from moco.security import hash_password, verify_password, create_access_token


logger = logging.getLogger(__name__)


async def signup(
    db: AsyncSession,
    email: str,
    password: str,
    display_name: str | None = None,
) -> tuple[User, str]:
    """
    Register a new user.

    Args:
        db: Database session.
        email: User's email (must be unique).
        password: Plaintext password (will be hashed before storage).
        display_name: Optional name shown in the UI.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        DuplicateEmailError: If the email is already registered.
    """
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise DuplicateEmailError(email)

    user = User(
        email=email,
        hashed_password=hash_password(password),
        display_name=display_name,
    )
    db.add(user)
    # Flush to get user.id assigned before it goes into the token
    await db.flush()

    logger.info("Registered user %s", user.id)
    token = create_access_token(data={"sub": str(user.id)})
    return user, token


async def login(
    db: AsyncSession,
    email: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a JWT token.

    Raises:
        InvalidCredentialsError: If the email doesn't exist, the password is
            wrong, or the user has been deactivated.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.hashed_password) or not user.is_active:
        logger.info("Rejected login attempt")
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id)})
    return user, token
