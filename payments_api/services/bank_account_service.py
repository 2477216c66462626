"""
Bank account service — business logic for bank account operations.

This module handles:
  - Account creation (customer-chosen account number, supported currency)
  - Account retrieval (single or list, scoped to the owner)
  - Partial updates, including the administrative balance change
  - Deletion, refused while any payment references the account

Ownership enforcement:
  All functions accept a ``user_id`` parameter. This is always the
  authenticated user's ID, passed in by the router. An account that exists
  but belongs to someone else is reported exactly like a missing one
  (AccountNotFoundError), so IDs cannot be probed.

Returned accounts always have their currency loaded so responses can show
the currency name.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payments_api.exceptions import (
    AccountHasPaymentsError,
    AccountNotFoundError,
    InvalidCurrencyError,
)
from payments_api.models.bank_account import BankAccount
from payments_api.models.payment import Payment
from payments_api.services.availability_service import ensure_available, flush_unique
from payments_api.services.currency_service import find_currency

logger = logging.getLogger(__name__)


async def _require_currency(db: AsyncSession, code: str) -> None:
    if await find_currency(db, code) is None:
        raise InvalidCurrencyError(code)


async def _find_owned(
    db: AsyncSession,
    user_id: uuid.UUID,
    account_id: uuid.UUID,
) -> BankAccount:
    result = await db.execute(
        select(BankAccount)
        .where(BankAccount.id == account_id)
        .where(BankAccount.user_id == user_id)
        .options(selectinload(BankAccount.currency))
        .execution_options(populate_existing=True)
    )
    account = result.scalar_one_or_none()
    if account is None:
        raise AccountNotFoundError(account_id)
    return account


async def create_bank_account(
    db: AsyncSession,
    user_id: uuid.UUID,
    account_number: str,
    account_type: str,
    currency_code: str,
    balance: Decimal = Decimal("0.00"),
) -> BankAccount:
    """
    Open a bank account for ``user_id``.

    Raises:
        DuplicateFieldError: If the account number is already taken.
        InvalidCurrencyError: If the currency is not supported.
    """
    unique_values = {"account_number": account_number}
    await ensure_available(db, unique_values)
    await _require_currency(db, currency_code)

    account = BankAccount(
        user_id=user_id,
        account_number=account_number,
        account_type=account_type,
        currency_code=currency_code,
        balance=balance,
    )
    db.add(account)
    await flush_unique(db, unique_values)

    logger.info(
        "Bank account created",
        extra={"account_id": str(account.id), "user_id": str(user_id)},
    )
    return await _find_owned(db, user_id, account.id)


async def get_bank_accounts(
    db: AsyncSession,
    user_id: uuid.UUID,
) -> list[BankAccount]:
    """List all accounts belonging to ``user_id``, oldest first."""
    result = await db.execute(
        select(BankAccount)
        .where(BankAccount.user_id == user_id)
        .options(selectinload(BankAccount.currency))
        .order_by(BankAccount.created_at)
    )
    return list(result.scalars().all())


async def get_bank_account(
    db: AsyncSession,
    user_id: uuid.UUID,
    account_id: uuid.UUID,
) -> BankAccount:
    """
    Raises:
        AccountNotFoundError: If the account doesn't exist or isn't owned.
    """
    return await _find_owned(db, user_id, account_id)


async def update_bank_account(
    db: AsyncSession,
    user_id: uuid.UUID,
    account_id: uuid.UUID,
    account_number: str | None = None,
    account_type: str | None = None,
    currency_code: str | None = None,
    balance: Decimal | None = None,
) -> BankAccount:
    """
    Apply a partial update. Fields left as None are unchanged.

    This is the only path that changes a balance; creating a payment
    never does.

    Raises:
        AccountNotFoundError: If the account doesn't exist or isn't owned.
        DuplicateFieldError: If a new account number is already taken.
        InvalidCurrencyError: If a new currency is not supported.
    """
    account = await _find_owned(db, user_id, account_id)

    unique_values = {
        "account_number": (
            account_number if account_number not in (None, account.account_number) else None
        ),
    }
    await ensure_available(db, unique_values)
    if currency_code is not None:
        await _require_currency(db, currency_code)

    if account_number is not None:
        account.account_number = account_number
    if account_type is not None:
        account.account_type = account_type
    if currency_code is not None:
        account.currency_code = currency_code
    if balance is not None:
        account.balance = balance

    await flush_unique(db, unique_values)
    return await _find_owned(db, user_id, account_id)


async def delete_bank_account(
    db: AsyncSession,
    user_id: uuid.UUID,
    account_id: uuid.UUID,
) -> None:
    """
    Delete an account that has never been used for a payment.

    Raises:
        AccountNotFoundError: If the account doesn't exist or isn't owned.
        AccountHasPaymentsError: If any payment references the account.
    """
    account = await _find_owned(db, user_id, account_id)

    result = await db.execute(
        select(Payment.id).where(Payment.account_id == account_id).limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise AccountHasPaymentsError(account_id)

    await db.delete(account)
    await db.flush()
    logger.info("Bank account deleted", extra={"account_id": str(account_id)})
