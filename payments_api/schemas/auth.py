"""
Pydantic schemas for authentication and profile endpoints.

These schemas define the request/response contracts for the auth API.
Pydantic validates incoming data automatically — if a required field is
missing or malformed, FastAPI returns a 422 error before our code
even runs.
"""

import re
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from payments_api.schemas.user import UserResponse


# At least 8 characters with one lowercase, one uppercase, one digit and one
# special character from @$!%*?&, and nothing outside those classes.
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
PASSWORD_DESCRIPTION = (
    "At least 8 characters with 1 uppercase, 1 lowercase, 1 number, "
    "and 1 special character (@$!%*?&)"
)


def check_password_strength(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_DESCRIPTION)
    return value


class UserRegistrationRequest(BaseModel):
    """Request body for POST /api/auth/register."""
    full_name: str = Field(min_length=1, max_length=150)
    username: str = Field(pattern=r"^[a-zA-Z0-9]{3,20}$")
    email: EmailStr
    password: str = Field(description=PASSWORD_DESCRIPTION)
    # Admins are provisioned by an operator, never through signup
    role: Literal["Customer", "Employee"] = "Customer"
    id_number: str | None = Field(None, min_length=1, max_length=30)
    employee_number: str | None = Field(None, min_length=1, max_length=30)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)


class UserLoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Response body for successful login — user info + session token."""
    user: UserResponse
    token: str
    token_type: str = "bearer"


class ProfileUpdateRequest(BaseModel):
    """Request body for PUT /api/auth/profile (full replacement)."""
    full_name: str = Field(min_length=1, max_length=150)
    email: EmailStr
    id_number: str | None = Field(None, max_length=30)
    employee_number: str | None = Field(None, max_length=30)

    @model_validator(mode="after")
    def blank_numbers_are_none(self):
        """Treat empty identity numbers as "not provided"."""
        if not self.id_number:
            self.id_number = None
        if not self.employee_number:
            self.employee_number = None
        return self


class ChangePasswordRequest(BaseModel):
    """Request body for PUT /api/auth/change-password."""
    current_password: str
    new_password: str = Field(description=PASSWORD_DESCRIPTION)
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)

    @model_validator(mode="after")
    def passwords_must_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class AvailabilityResponse(BaseModel):
    """Response body for the check-* endpoints."""
    available: bool


class MessageResponse(BaseModel):
    message: str
