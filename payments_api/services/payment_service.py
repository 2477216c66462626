"""
Payment service — the payment lifecycle and verification workflow.

THIS IS THE CORE OF THE PROJECT. It handles:
  - Creating payments (ownership, currency and balance preconditions)
  - Reading payments, always scoped to the owning customer
  - Recording reviewer decisions and the resulting status

Creation preconditions, checked in this order, each failing fast:
  1. The bank account exists and belongs to the caller
     -> AccountNotFoundError (missing and not-owned look the same)
  2. The currency code is supported
     -> InvalidCurrencyError
  3. The amount does not exceed the account's current balance
     -> InsufficientFundsError
  (amount > 0 is enforced by the request schema and a CHECK constraint)

A created payment always starts as "Pending" with no verifications. The
account balance is only checked, never debited.

Status transitions on verify_payment(action):
    action == "Verified"   ->  status = "Verified"
    any other action       ->  status = "Pending"   (a "Rejected" included)
Every call appends one PaymentVerification row, whatever the action, so a
second "Verified" leaves the status unchanged but grows the trail.

Atomicity:
  The status change and the verification row are flushed in the same
  session and committed together by the request's unit of work (get_db).
  A failure anywhere rolls back both.

Role checks (only Employee/Admin may verify) are done by the router
dependency, not here.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payments_api.exceptions import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidCurrencyError,
    PaymentNotFoundError,
)
from payments_api.models.bank_account import BankAccount
from payments_api.models.payment import Payment, PaymentStatus
from payments_api.models.payment_verification import PaymentVerification, VerificationAction
from payments_api.services.currency_service import find_currency

logger = logging.getLogger(__name__)


def _hydrated():
    """Select Payment with everything the response needs loaded eagerly."""
    return (
        select(Payment)
        .options(
            selectinload(Payment.bank_account),
            selectinload(Payment.currency),
            selectinload(Payment.verifications).selectinload(PaymentVerification.employee),
        )
        .execution_options(populate_existing=True)
    )


def _owned_by(query, owner_id: uuid.UUID):
    return query.join(Payment.bank_account).where(BankAccount.user_id == owner_id)


def next_status(action: str) -> PaymentStatus:
    """Status a payment takes after a reviewer records ``action``."""
    if action == VerificationAction.VERIFIED.value:
        return PaymentStatus.VERIFIED
    return PaymentStatus.PENDING


async def create_payment(
    db: AsyncSession,
    owner_id: uuid.UUID,
    account_id: uuid.UUID,
    amount: Decimal,
    currency_code: str,
    payee_account: str,
    payee_swift_code: str,
) -> Payment:
    """
    Create a Pending payment from one of the owner's accounts.

    Args:
        db: Database session.
        owner_id: The authenticated user's ID.
        account_id: The paying bank account (must belong to owner_id).
        amount: Positive amount; must not exceed the account balance.
        currency_code: Supported currency code.
        payee_account: Beneficiary account identifier.
        payee_swift_code: Beneficiary SWIFT/BIC or routing code.

    Returns:
        The created Payment with account, currency and (empty)
        verifications loaded.

    Raises:
        AccountNotFoundError: If the account doesn't exist or isn't owned.
        InvalidCurrencyError: If the currency is not supported.
        InsufficientFundsError: If amount exceeds the account balance.
    """
    result = await db.execute(
        select(BankAccount)
        .where(BankAccount.id == account_id)
        .where(BankAccount.user_id == owner_id)
    )
    account = result.scalar_one_or_none()
    if account is None:
        raise AccountNotFoundError(account_id)

    if await find_currency(db, currency_code) is None:
        raise InvalidCurrencyError(currency_code)

    if amount > account.balance:
        logger.info(
            "Payment declined for insufficient balance",
            extra={"account_id": str(account_id), "amount": str(amount)},
        )
        raise InsufficientFundsError(
            account_id=account_id,
            requested=amount,
            available=account.balance,
        )

    now = datetime.now(timezone.utc)
    payment = Payment(
        account_id=account_id,
        amount=amount,
        currency_code=currency_code,
        payee_account=payee_account,
        payee_swift_code=payee_swift_code,
        status=PaymentStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    db.add(payment)
    await db.flush()

    logger.info(
        "Payment created",
        extra={
            "payment_id": str(payment.id),
            "account_id": str(account_id),
            "amount": str(amount),
            "currency": currency_code,
        },
    )
    return await get_payment(db, owner_id, payment.id)


async def get_payment(
    db: AsyncSession,
    owner_id: uuid.UUID,
    payment_id: uuid.UUID,
) -> Payment:
    """
    Get a single payment owned (through its account) by ``owner_id``.

    Raises:
        PaymentNotFoundError: If the payment doesn't exist or isn't owned.
    """
    result = await db.execute(
        _owned_by(_hydrated(), owner_id).where(Payment.id == payment_id)
    )
    payment = result.scalar_one_or_none()
    if payment is None:
        raise PaymentNotFoundError(payment_id)
    return payment


async def list_payments(
    db: AsyncSession,
    owner_id: uuid.UUID,
) -> list[Payment]:
    """List every payment from the owner's accounts, newest first."""
    result = await db.execute(
        _owned_by(_hydrated(), owner_id).order_by(Payment.created_at.desc())
    )
    return list(result.scalars().all())


async def verify_payment(
    db: AsyncSession,
    payment_id: uuid.UUID,
    employee_id: uuid.UUID,
    action: str,
) -> Payment:
    """
    Record a reviewer decision on a payment.

    Args:
        db: Database session.
        payment_id: The payment under review.
        employee_id: The reviewing user's ID.
        action: "Verified" or "Rejected". Any other text is stored as-is
                and, like "Rejected", leaves the payment Pending.

    Returns:
        The payment with its updated status and verification trail.

    Raises:
        PaymentNotFoundError: If the payment doesn't exist.
    """
    payment = await db.get(Payment, payment_id)
    if payment is None:
        raise PaymentNotFoundError(payment_id)

    now = datetime.now(timezone.utc)
    previous_status = payment.status
    payment.status = next_status(action).value
    payment.updated_at = now

    db.add(
        PaymentVerification(
            payment_id=payment_id,
            employee_id=employee_id,
            action=action,
            verified_at=now,
        )
    )
    await db.flush()

    logger.info(
        "Payment reviewed",
        extra={
            "payment_id": str(payment_id),
            "employee_id": str(employee_id),
            "action": action,
            "from_status": previous_status,
            "to_status": payment.status,
        },
    )

    result = await db.execute(_hydrated().where(Payment.id == payment_id))
    return result.scalar_one()


# ---------------------------------------------------------------------------
# Reviewer read-only functions
# ---------------------------------------------------------------------------

async def list_payments_for_review(
    db: AsyncSession,
    status_filter: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Payment]:
    """
    [REVIEWERS ONLY] List payments across all customers, newest first.

    The router layer enforces that only Employee/Admin users can call this.
    """
    query = (
        _hydrated()
        .order_by(Payment.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    if status_filter:
        query = query.where(Payment.status == status_filter)

    result = await db.execute(query)
    return list(result.scalars().all())
