"""
Bank accounts router — account management for the authenticated user.

Endpoints (all require a session, all scoped to the caller's accounts):
  POST   /api/bank-accounts                              — Open an account
  GET    /api/bank-accounts                              — List own accounts
  GET    /api/bank-accounts/check-account/{number}       — Account number availability
  GET    /api/bank-accounts/{account_id}                 — Account details
  PUT    /api/bank-accounts/{account_id}                 — Partial update
  DELETE /api/bank-accounts/{account_id}                 — Delete (no payments only)

Accounts owned by someone else return 404, the same as missing ones.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.database import get_db
from payments_api.dependencies import get_current_user
from payments_api.models.user import User
from payments_api.schemas.auth import AvailabilityResponse
from payments_api.schemas.bank_account import (
    BankAccountCreateRequest,
    BankAccountResponse,
    BankAccountUpdateRequest,
)
from payments_api.services import bank_account_service
from payments_api.services.availability_service import is_available

router = APIRouter()


@router.post(
    "",
    response_model=BankAccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a bank account",
)
async def create_bank_account(
    request: BankAccountCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Open a Checking, Savings or Business account.

    Returns 409 if the account number is taken and 400 if the currency is
    not supported.
    """
    return await bank_account_service.create_bank_account(
        db=db,
        user_id=user.id,
        account_number=request.account_number,
        account_type=request.account_type,
        currency_code=request.currency_code,
        balance=request.balance,
    )


@router.get(
    "",
    response_model=list[BankAccountResponse],
    summary="List your bank accounts",
)
async def list_bank_accounts(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await bank_account_service.get_bank_accounts(db, user.id)


# Declared before /{account_id} so "check-account" is not parsed as an ID
@router.get(
    "/check-account/{account_number}",
    response_model=AvailabilityResponse,
    summary="Check account number availability",
)
async def check_account_number(
    account_number: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return AvailabilityResponse(
        available=await is_available(db, "account_number", account_number)
    )


@router.get(
    "/{account_id}",
    response_model=BankAccountResponse,
    summary="Get bank account details",
)
async def get_bank_account(
    account_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await bank_account_service.get_bank_account(db, user.id, account_id)


@router.put(
    "/{account_id}",
    response_model=BankAccountResponse,
    summary="Update a bank account",
)
async def update_bank_account(
    account_id: uuid.UUID,
    request: BankAccountUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Only fields present in the body are changed."""
    return await bank_account_service.update_bank_account(
        db=db,
        user_id=user.id,
        account_id=account_id,
        **request.model_dump(exclude_none=True),
    )


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a bank account",
)
async def delete_bank_account(
    account_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Returns 409 if any payment was made from this account."""
    await bank_account_service.delete_bank_account(db, user.id, account_id)
