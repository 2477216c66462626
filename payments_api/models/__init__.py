"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. Other modules can import from payments_api.models directly
"""

from payments_api.models.user import User, UserRole, REVIEWER_ROLES  # noqa: F401
from payments_api.models.currency import Currency  # noqa: F401
from payments_api.models.bank_account import BankAccount, AccountType  # noqa: F401
from payments_api.models.payment import Payment, PaymentStatus  # noqa: F401
from payments_api.models.payment_verification import (  # noqa: F401
    PaymentVerification,
    VerificationAction,
)
