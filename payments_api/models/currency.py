"""
Currency model — the catalogue of supported ISO 4217 currencies.

The code is the primary key, so bank accounts and payments reference it
directly (e.g. currency_code="USD") and "is this a supported currency" is a
single primary-key lookup.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from payments_api.database import Base


class Currency(Base):
    __tablename__ = "currencies"

    code: Mapped[str] = mapped_column(
        String(3),
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
