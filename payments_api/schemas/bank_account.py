"""
Pydantic schemas for BankAccount endpoints.

Monetary amounts are decimals with two places. In JSON they may be sent as
numbers or strings ("100.00"); responses render them as strings so no
precision is lost on the way to the client.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


AccountTypeLiteral = Literal["Checking", "Savings", "Business"]


class BankAccountCreateRequest(BaseModel):
    """Request body for POST /api/bank-accounts."""
    account_number: str = Field(min_length=1, max_length=30)
    account_type: AccountTypeLiteral
    currency_code: str = Field(min_length=3, max_length=3)
    balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=18,
        decimal_places=2,
        description="Opening balance (must be non-negative)",
    )


class BankAccountUpdateRequest(BaseModel):
    """Request body for PUT /api/bank-accounts/{id} (all fields optional)."""
    account_number: str | None = Field(None, min_length=1, max_length=30)
    account_type: AccountTypeLiteral | None = None
    currency_code: str | None = Field(None, min_length=3, max_length=3)
    balance: Decimal | None = Field(None, ge=0, max_digits=18, decimal_places=2)


class BankAccountResponse(BaseModel):
    """Public representation of a bank account."""
    id: uuid.UUID
    user_id: uuid.UUID
    account_number: str
    account_type: str
    balance: Decimal
    currency_code: str
    currency_name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
