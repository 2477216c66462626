"""
Payment model — an outgoing payment request from a customer's bank account.

A payment does not point at its owner directly: the owner is the user of
the referenced bank account. Every ownership-scoped query therefore joins
through bank_accounts.

Status field:
  - "Pending": set at creation, and again whenever a reviewer records any
    action other than "Verified" (a rejection included)
  - "Verified": set when a reviewer records the action "Verified"
  - "Submitted": part of the published status vocabulary but never assigned
    by any operation in this service

The verification history lives in payment_verifications, one row per
reviewer decision, and is never rewritten.
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payments_api.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    VERIFIED = "Verified"
    SUBMITTED = "Submitted"  # unreachable; kept for API consumers


class Payment(Base):
    __tablename__ = "payments"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_positive_amount"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bank_accounts.id"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
    )

    currency_code: Mapped[str] = mapped_column(
        ForeignKey("currencies.code"),
        nullable=False,
    )

    payee_account: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    payee_swift_code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
    )

    # Indexed for newest-first listings
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    bank_account: Mapped["BankAccount"] = relationship(
        back_populates="payments",
    )

    currency: Mapped["Currency"] = relationship()

    verifications: Mapped[list["PaymentVerification"]] = relationship(
        back_populates="payment",
        order_by="PaymentVerification.verified_at",
    )

    # Flattened descriptors for the response schema
    @property
    def account_number(self) -> str:
        return self.bank_account.account_number

    @property
    def account_type(self) -> str:
        return self.bank_account.account_type

    @property
    def currency_name(self) -> str:
        return self.currency.name
