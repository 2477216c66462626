"""
User model — the authentication identity and banking customer in one row.

Each User holds a login credential (username + hashed password), contact
details, and a role:

  - CUSTOMER: owns bank accounts and creates payments
  - EMPLOYEE: reviews payments (verify / reject)
  - ADMIN: reviews payments; provisioned by an operator, never self-service

Identity numbers:
  - id_number: national ID, normally supplied by customers
  - employee_number: staff number, normally supplied by employees
  Both are optional but unique when present. NULLs never collide in a unique
  index on SQLite or PostgreSQL, so many users can leave them empty.

The password is stored as an Argon2id hash — never in plaintext.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payments_api.database import Base


class UserRole(str, enum.Enum):
    """
    Defines the role a user holds within the payments system.

    Inherits from str so the enum value serializes naturally to JSON
    and can be stored as a simple string in the database.
    """
    CUSTOMER = "Customer"
    EMPLOYEE = "Employee"
    ADMIN = "Admin"


# Roles allowed to adjudicate payments
REVIEWER_ROLES = frozenset({UserRole.EMPLOYEE, UserRole.ADMIN})


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    full_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
    )

    # Login identifier
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(150),
        unique=True,
        nullable=False,
        index=True,
    )

    # Argon2id hash of the password (never store plaintext!)
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.CUSTOMER,
        nullable=False,
    )

    id_number: Mapped[str | None] = mapped_column(
        String(30),
        unique=True,
        nullable=True,
    )

    employee_number: Mapped[str | None] = mapped_column(
        String(30),
        unique=True,
        nullable=True,
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
    bank_accounts: Mapped[list["BankAccount"]] = relationship(
        back_populates="user",
    )

    # Verification decisions this user made as a reviewer
    payment_verifications: Mapped[list["PaymentVerification"]] = relationship(
        back_populates="employee",
    )

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES
