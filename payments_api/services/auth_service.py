"""
Authentication service — registration, login and profile business logic.

This module contains the core auth logic, separated from HTTP concerns.
The router calls these functions and translates the results into HTTP
responses. This separation means the business logic can be tested
without spinning up a web server.

Registration flow:
  1. Check username, email, ID number and employee number availability,
     in that order, failing on the first one already taken
  2. Hash the password with Argon2id
  3. Insert the User; a unique-constraint violation at flush time is
     reported exactly like a failed pre-check

Login flow:
  1. Look up user by username
  2. Verify password against stored hash
  3. Return a session token

Every function takes the acting user explicitly. Nothing here reads the
current principal from request state.

Security notes:
  - Passwords are hashed before storage (never stored in plaintext)
  - Login returns the same error for "wrong password" and "unknown username"
    to prevent user enumeration attacks
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.exceptions import IncorrectPasswordError, InvalidCredentialsError
from payments_api.models.user import User, UserRole
from payments_api.security import hash_password, verify_password, create_access_token
from payments_api.services.availability_service import ensure_available, flush_unique

logger = logging.getLogger(__name__)


async def register(
    db: AsyncSession,
    full_name: str,
    username: str,
    email: str,
    password: str,
    role: UserRole = UserRole.CUSTOMER,
    id_number: str | None = None,
    employee_number: str | None = None,
) -> User:
    """
    Register a new user.

    Args:
        db: Database session.
        full_name: Display name.
        username: Login name (must be unique).
        email: Contact email (must be unique).
        password: Plaintext password (will be hashed before storage).
        role: CUSTOMER or EMPLOYEE for self-service signups.
        id_number: Optional national ID (unique when given).
        employee_number: Optional staff number (unique when given).

    Returns:
        The new User instance.

    Raises:
        DuplicateFieldError: If any unique value is already taken.
    """
    unique_values = {
        "username": username,
        "email": email,
        "id_number": id_number,
        "employee_number": employee_number,
    }
    await ensure_available(db, unique_values)

    user = User(
        full_name=full_name,
        username=username,
        email=email,
        hashed_password=hash_password(password),
        role=role,
        id_number=id_number,
        employee_number=employee_number,
    )
    db.add(user)
    await flush_unique(db, unique_values)

    logger.info(
        "User registered",
        extra={"user_id": str(user.id), "role": user.role.value},
    )
    return user


async def login(
    db: AsyncSession,
    username: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a session token.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        InvalidCredentialsError: If the username doesn't exist or the
                                 password is wrong.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    # Same error for both cases — prevents user enumeration
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("Login rejected", extra={"username": username})
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return user, token


async def update_profile(
    db: AsyncSession,
    user: User,
    full_name: str,
    email: str,
    id_number: str | None = None,
    employee_number: str | None = None,
) -> User:
    """
    Replace the user's editable profile fields.

    Unique values are checked against every OTHER user, so re-submitting
    your own email or ID number is not a collision.

    Raises:
        DuplicateFieldError: If another user already holds a unique value.
    """
    unique_values = {
        "email": email if email != user.email else None,
        "id_number": id_number if id_number != user.id_number else None,
        "employee_number": (
            employee_number if employee_number != user.employee_number else None
        ),
    }
    await ensure_available(db, unique_values, exclude_user_id=user.id)

    user.full_name = full_name
    user.email = email
    user.id_number = id_number
    user.employee_number = employee_number
    await flush_unique(db, unique_values)
    return user


async def change_password(
    db: AsyncSession,
    user: User,
    current_password: str,
    new_password: str,
) -> None:
    """
    Raises:
        IncorrectPasswordError: If current_password does not match.
    """
    if not verify_password(current_password, user.hashed_password):
        raise IncorrectPasswordError()

    user.hashed_password = hash_password(new_password)
    await db.flush()
    logger.info("Password changed", extra={"user_id": str(user.id)})
