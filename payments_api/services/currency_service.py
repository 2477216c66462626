"""
Currency service — the supported-currency catalogue.

Currencies are reference data. They are seeded once at startup (and by the
test fixtures) and only read afterwards.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.exceptions import CurrencyNotFoundError
from payments_api.models.currency import Currency


DEFAULT_CURRENCIES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "ZAR": "South African Rand",
    "JPY": "Japanese Yen",
    "CHF": "Swiss Franc",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CNY": "Chinese Yuan",
    "INR": "Indian Rupee",
}


async def seed_currencies(
    db: AsyncSession,
    currencies: dict[str, str] | None = None,
) -> int:
    """
    Insert any catalogue currencies that are missing. Idempotent.

    Returns:
        The number of currencies inserted.
    """
    currencies = currencies or DEFAULT_CURRENCIES
    result = await db.execute(select(Currency.code))
    existing = set(result.scalars().all())

    missing = [
        Currency(code=code, name=name)
        for code, name in currencies.items()
        if code not in existing
    ]
    db.add_all(missing)
    await db.flush()
    return len(missing)


async def list_currencies(db: AsyncSession) -> list[Currency]:
    result = await db.execute(select(Currency).order_by(Currency.code))
    return list(result.scalars().all())


async def find_currency(db: AsyncSession, code: str) -> Currency | None:
    """Primary-key lookup; None when the code is not supported."""
    return await db.get(Currency, code)


async def get_currency(db: AsyncSession, code: str) -> Currency:
    """
    Raises:
        CurrencyNotFoundError: If the code is not in the catalogue.
    """
    currency = await find_currency(db, code)
    if currency is None:
        raise CurrencyNotFoundError(code)
    return currency
