"""
Custom exception classes and FastAPI exception handlers.

Why custom exceptions?
  The service layer raises domain-specific errors (like InsufficientFundsError)
  without importing HTTP concepts. The handler layer then translates these
  into proper HTTP responses.

  This separation means:
    - Service code is testable without HTTP
    - Error responses are consistent across all endpoints
    - Adding new error types is straightforward

Exception hierarchy:
    PaymentsAPIError (base)
    ├── NotFoundError                 — referenced record absent or not owned
    │   ├── AccountNotFoundError
    │   ├── PaymentNotFoundError
    │   └── CurrencyNotFoundError
    ├── ConflictError                 — uniqueness or referential conflict
    │   ├── DuplicateFieldError       — "username is already taken", etc.
    │   └── AccountHasPaymentsError   — deleting an account with payments
    ├── InvalidArgumentError          — malformed or unknown input value
    │   ├── InvalidCurrencyError
    │   └── IncorrectPasswordError
    ├── InsufficientFundsError        — payment amount exceeds balance
    ├── InvalidCredentialsError       — login failure
    └── UnauthorizedAccessError       — caller lacks the required role

Every class carries an ``error_type`` slug and an ``http_status``; a single
handler per branch renders {"detail": ..., "error_type": ...}.
"""

import uuid
from decimal import Decimal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class PaymentsAPIError(Exception):
    """Base exception for all Payments API domain errors."""

    error_type = "payments_api_error"
    http_status = 400

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# NotFound
# ---------------------------------------------------------------------------

class NotFoundError(PaymentsAPIError):
    error_type = "not_found"
    http_status = 404


class AccountNotFoundError(NotFoundError):
    """
    Raised when a bank account does not exist OR belongs to another user.

    The two cases are deliberately reported the same way so that callers
    cannot probe for other users' account IDs.
    """

    error_type = "account_not_found"

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__(f"Bank account {account_id} not found")


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment does not exist or is not visible to the caller."""

    error_type = "payment_not_found"

    def __init__(self, payment_id: uuid.UUID):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} not found")


class CurrencyNotFoundError(NotFoundError):
    error_type = "currency_not_found"

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Currency {code} not found")


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------

class ConflictError(PaymentsAPIError):
    error_type = "conflict"
    http_status = 409


class DuplicateFieldError(ConflictError):
    """
    Raised when a unique value (username, email, ID number, employee number,
    account number) is already in use.

    Both the advisory availability pre-check and the database's unique
    constraint raise this same error.
    """

    error_type = "duplicate_field"

    FIELD_LABELS = {
        "username": "Username",
        "email": "Email",
        "id_number": "ID number",
        "employee_number": "Employee number",
        "account_number": "Account number",
    }

    def __init__(self, field: str, value: str | None = None):
        self.field = field
        self.value = value
        label = self.FIELD_LABELS.get(field, field)
        super().__init__(f"{label} is already taken")


class AccountHasPaymentsError(ConflictError):
    """Raised when deleting a bank account that still has payments."""

    error_type = "account_has_payments"

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__("Cannot delete bank account with existing payments")


# ---------------------------------------------------------------------------
# InvalidArgument
# ---------------------------------------------------------------------------

class InvalidArgumentError(PaymentsAPIError):
    error_type = "invalid_argument"
    http_status = 400


class InvalidCurrencyError(InvalidArgumentError):
    """Raised when a currency code is not in the supported set."""

    error_type = "invalid_currency"

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invalid currency code: {code}")


class IncorrectPasswordError(InvalidArgumentError):
    error_type = "incorrect_password"

    def __init__(self):
        super().__init__("Current password is incorrect")


# ---------------------------------------------------------------------------
# Payment and auth failures
# ---------------------------------------------------------------------------

class InsufficientFundsError(PaymentsAPIError):
    """
    Raised when a payment amount exceeds the account's current balance.

    Attributes:
        account_id: The account that lacks sufficient funds.
        requested: The payment amount.
        available: The account balance at the time of the check.
    """

    error_type = "insufficient_funds"
    # Unprocessable Entity — the request was valid but business rules reject it
    http_status = 422

    def __init__(
        self,
        account_id: uuid.UUID,
        requested: Decimal,
        available: Decimal,
    ):
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient balance: requested {requested}, available {available}"
        )


class InvalidCredentialsError(PaymentsAPIError):
    """Raised when login credentials are incorrect."""

    error_type = "invalid_credentials"
    http_status = 401

    def __init__(self):
        super().__init__("Invalid username or password")


class UnauthorizedAccessError(PaymentsAPIError):
    """Raised when a user lacks the role an operation requires."""

    error_type = "unauthorized_access"
    http_status = 403

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so the base
    handler covers every subclass; InsufficientFundsError gets its own to
    expose the amounts involved.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content={
                "detail": exc.detail,
                "error_type": exc.error_type,
                "requested": str(exc.requested),
                "available": str(exc.available),
            },
        )

    @app.exception_handler(DuplicateFieldError)
    async def duplicate_field_handler(
        request: Request, exc: DuplicateFieldError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content={
                "detail": exc.detail,
                "error_type": exc.error_type,
                "field": exc.field,
            },
        )

    @app.exception_handler(PaymentsAPIError)
    async def payments_api_error_handler(
        request: Request, exc: PaymentsAPIError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content={"detail": exc.detail, "error_type": exc.error_type},
        )
