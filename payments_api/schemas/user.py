"""
Pydantic schemas for User-related responses.

These schemas control what user data is exposed through the API.
Notice that hashed_password is NEVER included in any response schema —
this is a critical security boundary.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel

from payments_api.models.user import UserRole


class UserResponse(BaseModel):
    """Public representation of a User (never includes password hash)."""
    id: uuid.UUID
    full_name: str
    username: str
    email: str
    role: UserRole
    id_number: str | None
    employee_number: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
