"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain-specific errors without importing HTTP
concepts; the handlers registered here translate them into consistent
JSON responses: {"detail": "...", "error_type": "..."}.

The calculators never raise. Malformed numbers, dangling references and
over-allocated data are resolved arithmetically (see moco.calculators).
These exceptions cover the request boundary only: missing rows, rows
owned by someone else, bad references in a request body, and the
write-time allocation guards.

Exception hierarchy:
    MocoError (base)
    ├── ResourceNotFoundError   : requested row doesn't exist
    ├── UnauthorizedAccessError : row belongs to another user
    ├── InvalidReferenceError   : request points at a missing/foreign row
    ├── OverAllocationError     : budget write would exceed its limit
    ├── InvalidBudgetInputError : category/subcategory missing percent or amount
    ├── ResourceInUseError      : delete of a row other rows still reference
    ├── DuplicateEmailError     : signup with a registered email
    └── InvalidCredentialsError : bad login
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class MocoError(Exception):
    """Base exception for all moco domain errors."""

    status_code = 400
    error_type = "moco_error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)

    def to_content(self) -> dict:
        return {"detail": self.detail, "error_type": self.error_type}


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class ResourceNotFoundError(MocoError):
    """Raised when a requested row does not exist."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, resource: str, resource_id: uuid.UUID):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} {resource_id} not found")


class UnauthorizedAccessError(MocoError):
    """Raised when a user attempts to access a row they don't own."""

    status_code = 403
    error_type = "unauthorized_access"

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


class InvalidReferenceError(MocoError):
    """
    Raised when a request body references a row that doesn't exist, belongs
    to another user, or doesn't fit (e.g. a subcategory of a different
    category).
    """

    status_code = 422
    error_type = "invalid_reference"

    def __init__(self, field: str, detail: str):
        self.field = field
        super().__init__(detail)

    def to_content(self) -> dict:
        return {**super().to_content(), "field": self.field}


class OverAllocationError(MocoError):
    """
    Raised when a category or subcategory write would push allocations past
    their limit (total income, or the parent category's allocation).

    Attributes:
        allocated: Total allocation after the proposed write.
        limit: The amount it may not exceed.
    """

    status_code = 422
    error_type = "over_allocation"

    def __init__(self, allocated: int, limit: int, detail: str):
        self.allocated = allocated
        self.limit = limit
        super().__init__(detail)

    def to_content(self) -> dict:
        return {**super().to_content(), "allocated": self.allocated, "limit": self.limit}


class InvalidBudgetInputError(MocoError):
    """
    Raised when a category or subcategory would be stored without the
    inputs it needs (an income line without an amount, an expense envelope
    with neither a percent nor an amount).
    """

    status_code = 422
    error_type = "invalid_budget_input"

    def __init__(self, field: str, detail: str):
        self.field = field
        super().__init__(detail)

    def to_content(self) -> dict:
        return {**super().to_content(), "field": self.field}


class ResourceInUseError(MocoError):
    """Raised when deleting a row that other rows still point at."""

    status_code = 409
    error_type = "resource_in_use"

    def __init__(self, resource: str, resource_id: uuid.UUID, detail: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            detail or f"{resource.capitalize()} {resource_id} is still referenced"
        )


class DuplicateEmailError(MocoError):
    """Raised when attempting to register with an email that's already in use."""

    status_code = 409
    error_type = "duplicate_email"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already registered")


class InvalidCredentialsError(MocoError):
    """Raised when login credentials are incorrect."""

    status_code = 401
    error_type = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid email or password")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the domain exception handler with the FastAPI application.

    Every MocoError subclass carries its own status code and error_type,
    so one handler covers the whole hierarchy. Called once in main.py.
    """

    @app.exception_handler(MocoError)
    async def moco_error_handler(request: Request, exc: MocoError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())
