"""
Database engine, session management, and base model class.

This module sets up SQLAlchemy 2.0 with async support. Key components:

  - engine: The async database engine (connection pool for production DBs)
  - AsyncSessionLocal: Factory for creating async database sessions
  - Base: Declarative base class that all ORM models inherit from
  - get_db(): FastAPI dependency that provides a session per request

Ownership:
  Every table except `users` carries a `user_id` column. Services always
  filter on it, which gives each user the same isolation a row-level
  security policy would.

Session lifecycle:
  Each API request gets its own session via get_db(). The session commits
  on success and rolls back on any exception.
"""

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from moco.config import settings
from moco.events import discard_pending, publish_pending


# echo=True in debug mode logs all SQL statements.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
)

# expire_on_commit=False prevents lazy-load errors after commit in async context.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def ensure_sqlite_directory(url: str = settings.DATABASE_URL) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    database = make_url(url).database
    if url.startswith("sqlite") and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


async def get_db():
    """
    FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/wallets")
        async def list_wallets(db: AsyncSession = Depends(get_db)):
            ...

    The session is committed on success and rolled back on any exception,
    then closed when the request completes. Change events recorded during
    the request are published only after the commit.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            discard_pending(session)
            raise
        publish_pending(session)
