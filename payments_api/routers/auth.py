"""
Authentication router — registration, login, session and profile endpoints.

Endpoints:
  POST /api/auth/register                        — Register a new user
  POST /api/auth/login                           — Authenticate, get a token + cookie
  POST /api/auth/logout                          — Clear the session cookie
  GET  /api/auth/me                              — Current user
  PUT  /api/auth/profile                         — Update profile fields
  PUT  /api/auth/change-password                 — Change password
  GET  /api/auth/check-username/{username}       — Availability checks
  GET  /api/auth/check-email/{email}
  GET  /api/auth/check-idnumber/{id_number}
  GET  /api/auth/check-employee-number/{number}

Security audit notes:
  - Plaintext passwords exist only in memory during request processing;
    they are hashed before any database operation and never logged.
  - The session cookie is HttpOnly so page scripts cannot read it.
  - SQLAlchemy's echo mode (DEBUG=True) logs SQL statements, but only
    the Argon2 hash is included in INSERT statements — never the plaintext.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.config import settings
from payments_api.database import get_db
from payments_api.dependencies import get_current_user
from payments_api.models.user import User, UserRole
from payments_api.schemas.auth import (
    AvailabilityResponse,
    ChangePasswordRequest,
    LoginResponse,
    MessageResponse,
    ProfileUpdateRequest,
    UserLoginRequest,
    UserRegistrationRequest,
)
from payments_api.schemas.user import UserResponse
from payments_api.services import auth_service
from payments_api.services.availability_service import is_available

router = APIRouter()


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: UserRegistrationRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a customer or employee.

    - **username**: 3-20 alphanumeric characters, unique
    - **email**: valid email, unique
    - **password**: 8+ characters with upper, lower, digit and special character
    - **id_number** / **employee_number**: optional, unique when given

    Returns 409 naming the first field that is already taken.
    """
    return await auth_service.register(
        db=db,
        full_name=request.full_name,
        username=request.username,
        email=request.email,
        password=request.password,
        role=UserRole(request.role),
        id_number=request.id_number,
        employee_number=request.employee_number,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Authenticate and start a session",
)
async def login(
    request: UserLoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with username and password.

    The session token is returned in the body and also set as an HttpOnly
    cookie. API clients send it back as:

        Authorization: Bearer <token>
    """
    user, token = await auth_service.login(
        db=db,
        username=request.username,
        password=request.password,
    )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return LoginResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="End the browser session",
)
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
):
    """Clear the session cookie. Bearer tokens simply expire."""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user",
)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update profile fields",
)
async def update_profile(
    request: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace full name, email and identity numbers.

    Values already held by the current user are not collisions; values held
    by anyone else return 409.
    """
    return await auth_service.update_profile(
        db=db,
        user=user,
        full_name=request.full_name,
        email=request.email,
        id_number=request.id_number,
        employee_number=request.employee_number,
    )


@router.put(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
)
async def change_password(
    request: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(
        db=db,
        user=user,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    return MessageResponse(message="Password changed successfully")


# ---------------------------------------------------------------------------
# Availability checks (public, used by the signup form)
# ---------------------------------------------------------------------------

@router.get("/check-username/{username}", response_model=AvailabilityResponse)
async def check_username(username: str, db: AsyncSession = Depends(get_db)):
    return AvailabilityResponse(available=await is_available(db, "username", username))


@router.get("/check-email/{email}", response_model=AvailabilityResponse)
async def check_email(email: str, db: AsyncSession = Depends(get_db)):
    return AvailabilityResponse(available=await is_available(db, "email", email))


@router.get("/check-idnumber/{id_number}", response_model=AvailabilityResponse)
async def check_id_number(id_number: str, db: AsyncSession = Depends(get_db)):
    return AvailabilityResponse(available=await is_available(db, "id_number", id_number))


@router.get("/check-employee-number/{employee_number}", response_model=AvailabilityResponse)
async def check_employee_number(employee_number: str, db: AsyncSession = Depends(get_db)):
    return AvailabilityResponse(
        available=await is_available(db, "employee_number", employee_number)
    )
