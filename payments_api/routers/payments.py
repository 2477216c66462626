"""
Payments router — payment creation, lookup and review.

Customer endpoints (scoped to payments from the caller's own accounts):
  POST /api/payments                    — Create a payment (status Pending)
  GET  /api/payments                    — List own payments, newest first
  GET  /api/payments/{payment_id}       — Get one payment

Reviewer endpoints (Employee or Admin role):
  GET  /api/payments/review             — List all payments, optional status filter
  POST /api/payments/{payment_id}/verify — Record "Verified" or "Rejected"
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.database import get_db
from payments_api.dependencies import get_current_user, require_reviewer
from payments_api.models.user import User
from payments_api.schemas.payment import (
    PaymentCreateRequest,
    PaymentResponse,
    PaymentVerifyRequest,
)
from payments_api.services import payment_service

router = APIRouter()


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a payment",
)
async def create_payment(
    request: PaymentCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a payment from one of your accounts.

    - 404 if the account is missing or not yours
    - 400 if the currency is not supported
    - 422 if the amount exceeds the account balance

    The balance is checked, not debited.
    """
    return await payment_service.create_payment(
        db=db,
        owner_id=user.id,
        account_id=request.account_id,
        amount=request.amount,
        currency_code=request.currency_code,
        payee_account=request.payee_account,
        payee_swift_code=request.payee_swift_code,
    )


@router.get(
    "",
    response_model=list[PaymentResponse],
    summary="List your payments",
)
async def list_payments(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.list_payments(db, user.id)


@router.get(
    "/review",
    response_model=list[PaymentResponse],
    summary="[Reviewer] List payments across all customers",
)
async def list_payments_for_review(
    status: str | None = Query(None, description="Filter by status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    reviewer: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.list_payments_for_review(
        db=db,
        status_filter=status,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment details",
)
async def get_payment(
    payment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.get_payment(db, user.id, payment_id)


@router.post(
    "/{payment_id}/verify",
    response_model=PaymentResponse,
    summary="[Reviewer] Verify or reject a payment",
)
async def verify_payment(
    payment_id: uuid.UUID,
    request: PaymentVerifyRequest,
    reviewer: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a review decision.

    "Verified" sets the status to Verified. Any other action, "Rejected"
    included, sets it to Pending. Each call adds one entry to the
    payment's verification trail.
    """
    return await payment_service.verify_payment(
        db=db,
        payment_id=payment_id,
        employee_id=reviewer.id,
        action=request.action,
    )
