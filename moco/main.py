"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Logging: one stream handler at LOG_LEVEL
  2. Lifespan manager: handles startup/shutdown (DB table creation, cleanup)
  3. CORS middleware: allows frontend origins to make cross-origin requests
  4. Exception handlers: maps domain errors to HTTP responses
  5. Router registration: mounts all API endpoint groups

Running locally:
    uvicorn moco.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import moco.models  # noqa: F401  (registers every table on Base.metadata)
from moco.config import settings
from moco.database import engine, Base, ensure_sqlite_directory
from moco.exceptions import register_exception_handlers
from moco.routers import auth, budget, changes, dashboard, debts, goals, transactions, wallets


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """Send `moco.*` log records to stderr at `level`."""
    logger = logging.getLogger("moco")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Creates the SQLite directory and all database tables if they don't
      exist. In production, schema changes would go through migrations.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    ensure_sqlite_directory()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.getLogger(__name__).info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Personal finance API: wallets, budgets, transactions, goals and debts",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(wallets.router, prefix="/wallets", tags=["Wallets"])
app.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
app.include_router(budget.router, prefix="/budget", tags=["Budget"])
app.include_router(goals.router, prefix="/goals", tags=["Goals"])
app.include_router(debts.router, prefix="/debts", tags=["Debts"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
app.include_router(changes.router, tags=["Changes"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe for deployments."""
    return {"status": "ok", "version": settings.APP_VERSION}
