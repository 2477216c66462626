"""
Availability service — "is this unique value still free?" checks.

One function answers every uniqueness question the API asks before a write:

    is_available(db, "username", "jdoe")
    is_available(db, "email", "jdoe@example.com", exclude_user_id=user.id)
    is_available(db, "account_number", "ACC-0001")

The check is advisory. Between this read and the caller's INSERT/UPDATE,
another request can claim the same value; the database's unique index is
what actually decides. Writers therefore also call ``flush_unique``
around their flush, which turns the constraint violation into the same
DuplicateFieldError the pre-check produces.

Values are compared exactly as stored: no case folding, no trimming.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.exceptions import DuplicateFieldError, InvalidArgumentError
from payments_api.models.bank_account import BankAccount
from payments_api.models.user import User


# field name -> (model, column)
CHECKABLE_FIELDS = {
    "username": (User, User.username),
    "email": (User, User.email),
    "id_number": (User, User.id_number),
    "employee_number": (User, User.employee_number),
    "account_number": (BankAccount, BankAccount.account_number),
}


async def is_available(
    db: AsyncSession,
    field: str,
    value: str,
    exclude_user_id: uuid.UUID | None = None,
) -> bool:
    """
    Return True when no existing row carries ``value`` in ``field``.

    Args:
        db: Database session.
        field: One of CHECKABLE_FIELDS.
        value: Candidate value.
        exclude_user_id: For user fields, ignore this user's own row (used
                         by profile updates so "keep my email" is allowed).

    Raises:
        InvalidArgumentError: If the field is not checkable.
    """
    if field not in CHECKABLE_FIELDS:
        raise InvalidArgumentError(f"Unknown availability field: {field}")

    model, column = CHECKABLE_FIELDS[field]
    query = select(model.id).where(column == value).limit(1)
    if exclude_user_id is not None and model is User:
        query = query.where(User.id != exclude_user_id)

    result = await db.execute(query)
    return result.scalar_one_or_none() is None


async def ensure_available(
    db: AsyncSession,
    candidates: dict[str, str | None],
    exclude_user_id: uuid.UUID | None = None,
) -> None:
    """
    Check several fields in order and fail on the first one that is taken.

    Fields whose value is None are skipped (optional identity numbers).

    Raises:
        DuplicateFieldError: For the first colliding field.
    """
    for field, value in candidates.items():
        if value is None:
            continue
        if not await is_available(db, field, value, exclude_user_id):
            raise DuplicateFieldError(field, value)


def duplicate_field_from_integrity_error(
    exc: IntegrityError,
    candidates: dict[str, str | None],
) -> DuplicateFieldError | None:
    """
    Map a unique-constraint violation to the field that caused it.

    SQLite reports "UNIQUE constraint failed: users.username"; PostgreSQL
    reports the constraint name and "Key (username)=(...)". Both mention the
    column name, which is all we need.
    """
    message = str(exc.orig)
    for field, value in candidates.items():
        if value is not None and field in message:
            return DuplicateFieldError(field, value)
    return None


async def flush_unique(
    db: AsyncSession,
    candidates: dict[str, str | None],
) -> None:
    """
    Flush pending writes, translating unique violations on ``candidates``.

    Other integrity errors (FK, CHECK) propagate unchanged. The session is
    unusable after a failed flush; the request's get_db rolls it back.
    """
    try:
        await db.flush()
    except IntegrityError as exc:
        duplicate = duplicate_field_from_integrity_error(exc, candidates)
        if duplicate is None:
            raise
        raise duplicate from exc
