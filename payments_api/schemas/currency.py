"""Pydantic schemas for Currency endpoints."""

from pydantic import BaseModel


class CurrencyResponse(BaseModel):
    code: str
    name: str

    model_config = {"from_attributes": True}
