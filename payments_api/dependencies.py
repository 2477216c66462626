"""
FastAPI dependencies for authentication and authorization.

Dependencies are reusable functions that FastAPI injects into route handlers.
They form a small chain:

  get_current_user (session token -> User)
      └── require_reviewer (User -> User)   [EMPLOYEE or ADMIN role]

The session token is accepted from either place the login endpoint puts it:
  1. "Authorization: Bearer <token>" header (API clients, tests, Swagger UI)
  2. The HttpOnly session cookie (the browser frontend)

Route handlers then pass ``user.id`` explicitly into the service layer;
services never look up "the current user" on their own.
"""

import uuid

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.config import settings
from payments_api.database import get_db
from payments_api.exceptions import UnauthorizedAccessError
from payments_api.models.user import User
from payments_api.security import decode_access_token


# auto_error=False so a missing header falls through to the cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the session token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is missing, invalid, or the user
                           no longer exists.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = bearer_token or request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise credentials_exception

    try:
        payload = decode_access_token(token)
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            raise credentials_exception
        user_id = uuid.UUID(user_id_str)
    except (JWTError, ValueError):
        raise credentials_exception

    user = await db.get(User, user_id)
    if user is None:
        raise credentials_exception

    return user


async def require_reviewer(
    user: User = Depends(get_current_user),
) -> User:
    """
    Require the authenticated user to be an Employee or Admin.

    The role is read from the user row, not the token, so a demotion takes
    effect immediately.

    Raises:
        UnauthorizedAccessError (403): If the user is a Customer.
    """
    if not user.is_reviewer:
        raise UnauthorizedAccessError("Employee or Admin role required")
    return user
