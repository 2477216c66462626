"""
BankAccount model — an account owned by exactly one User.

Each account has:
  - A unique account number chosen by the customer (up to 30 characters)
  - A type: "Checking", "Savings" or "Business"
  - A currency (FK to the currency catalogue)
  - A decimal balance with two places

Balance management:
  Payments check the balance but do not debit it; the balance only changes
  through an explicit account update. A CHECK constraint keeps it
  non-negative at the database level as well as in the request schema.

Why Numeric(18, 2)?
  Balances and payment amounts are exact decimal quantities. Numeric maps to
  Python's Decimal, so 0.10 + 0.20 == 0.30 holds and no float rounding ever
  reaches a comparison like "amount > balance".
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payments_api.database import Base


class AccountType(str, enum.Enum):
    CHECKING = "Checking"
    SAVINGS = "Savings"
    BUSINESS = "Business"


class BankAccount(Base):
    __tablename__ = "bank_accounts"

    # Database-level constraint: balance can never be negative
    __table_args__ = (
        CheckConstraint(
            "balance >= 0",
            name="ck_bank_accounts_non_negative_balance",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Owner of this account
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    account_number: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
    )

    # "Checking", "Savings" or "Business" (see AccountType)
    account_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    currency_code: Mapped[str] = mapped_column(
        ForeignKey("currencies.code"),
        nullable=False,
    )

    balance: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    user: Mapped["User"] = relationship(
        back_populates="bank_accounts",
    )

    currency: Mapped["Currency"] = relationship()

    payments: Mapped[list["Payment"]] = relationship(
        back_populates="bank_account",
    )

    @property
    def currency_name(self) -> str:
        return self.currency.name
