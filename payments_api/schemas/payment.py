"""
Pydantic schemas for Payment endpoints.

A payment response is "hydrated": besides its own fields it carries the
paying account's number and type, the currency name, and the full
verification trail with each reviewer's name.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class PaymentCreateRequest(BaseModel):
    """Request body for POST /api/payments."""
    account_id: uuid.UUID
    amount: Decimal = Field(
        gt=0,
        max_digits=18,
        decimal_places=2,
        description="Amount to pay (must be greater than 0)",
    )
    currency_code: str = Field(min_length=3, max_length=3)
    payee_account: str = Field(min_length=1, max_length=50)
    payee_swift_code: str = Field(min_length=1, max_length=20)


class PaymentVerifyRequest(BaseModel):
    """
    Request body for POST /api/payments/{id}/verify.

    "Verified" marks the payment Verified. "Rejected" (or any other action
    text) is recorded in the trail and leaves the payment Pending.
    """
    action: str = Field(min_length=1, max_length=20, examples=["Verified", "Rejected"])


class PaymentVerificationResponse(BaseModel):
    id: uuid.UUID
    payment_id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    action: str
    verified_at: datetime

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    """Public representation of a payment."""
    id: uuid.UUID
    account_id: uuid.UUID
    account_number: str
    account_type: str
    amount: Decimal
    currency_code: str
    currency_name: str
    payee_account: str
    payee_swift_code: str
    status: str
    created_at: datetime
    updated_at: datetime
    verifications: list[PaymentVerificationResponse]

    model_config = {"from_attributes": True}
