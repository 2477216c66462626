"""
PaymentVerification model — the append-only review trail of a payment.

One row is inserted per reviewer decision and rows are never updated or
deleted. A payment can collect several rows over its life, e.g. a
"Rejected" followed later by a "Verified", or two "Verified" rows when a
reviewer submits twice.

The action column stores the reviewer's action text as given. Only the
exact value "Verified" changes a payment's status to Verified.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payments_api.database import Base


class VerificationAction(str, enum.Enum):
    VERIFIED = "Verified"
    REJECTED = "Rejected"


class PaymentVerification(Base):
    __tablename__ = "payment_verifications"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    payment_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("payments.id"),
        nullable=False,
        index=True,
    )

    # The reviewing employee (not the payment's owner)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    action: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    payment: Mapped["Payment"] = relationship(
        back_populates="verifications",
    )

    employee: Mapped["User"] = relationship(
        back_populates="payment_verifications",
    )

    @property
    def employee_name(self) -> str:
        return self.employee.full_name
