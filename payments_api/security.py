"""
Security utilities: password hashing and session tokens.

This module centralizes all cryptographic operations so they're easy to
audit and update. Two concerns are handled here:

1. PASSWORD HASHING (Argon2)
   - Passwords are never stored in plaintext
   - Argon2id is memory-hard and time-hard, which makes GPU brute-forcing
     of a leaked hash table expensive
   - We use passlib's CryptContext for safe, high-level Argon2 operations

2. SESSION TOKENS (JSON Web Tokens)
   - After login, the user receives a signed JWT containing their user ID
     and role, both in the response body and as an HttpOnly cookie
   - The token is signed with SECRET_KEY using HS256 (HMAC-SHA256)
   - Tokens expire after ACCESS_TOKEN_EXPIRE_MINUTES (default: 24 hours)
   - The server is stateless: no session storage needed
"""

from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from payments_api.config import settings


# ---------------------------------------------------------------------------
# 1. Password Hashing (Argon2)
# ---------------------------------------------------------------------------

# If the active scheme ever changes, passlib verifies old hashes with their
# original scheme and flags them for rehash ("deprecated='auto'").
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Hash a new or changed password before it reaches the users table."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a login or change-password attempt against the stored hash.

    Callers turn a False into InvalidCredentialsError or
    IncorrectPasswordError; this function never raises for a mismatch.
    """
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# 2. Session Tokens (JWT)
# ---------------------------------------------------------------------------


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Sign the session credential issued at login.

    The same string is returned in the login body and stored in the
    HttpOnly session cookie, so its lifetime (ACCESS_TOKEN_EXPIRE_MINUTES)
    matches the cookie's max-age. Callers put the user id in "sub" and the
    role in "role"; the role is informational only, since require_reviewer
    re-reads it from the database on every request.
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify a session credential from the Bearer header or the cookie.

    Raises:
        JWTError: If the signature is wrong or the credential has expired.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
