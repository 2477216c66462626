"""
Currencies router — public, read-only view of the supported currencies.

Endpoints:
  GET /api/currencies          — All supported currencies
  GET /api/currencies/{code}   — One currency
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from payments_api.database import get_db
from payments_api.schemas.currency import CurrencyResponse
from payments_api.services import currency_service

router = APIRouter()


@router.get("", response_model=list[CurrencyResponse], summary="List currencies")
async def list_currencies(db: AsyncSession = Depends(get_db)):
    return await currency_service.list_currencies(db)


@router.get("/{code}", response_model=CurrencyResponse, summary="Get a currency")
async def get_currency(code: str, db: AsyncSession = Depends(get_db)):
    return await currency_service.get_currency(db, code)
