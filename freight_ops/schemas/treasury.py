"""
Pydantic schemas for cash boxes and exchange rates.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CashBoxCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    opening_balance: Decimal = Field(default=Decimal("0"), ge=0)


class CashBoxResponse(BaseModel):
    id: int
    name: str
    currency: str
    balance: Decimal
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CashOperation(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str = Field(default="Cash operation", max_length=255)


class ExchangeRateUpdate(BaseModel):
    from_currency: str = Field(min_length=3, max_length=3)
    to_currency: str = Field(min_length=3, max_length=3)
    rate: Decimal = Field(gt=0)
    updated_by: str | None = None


class ConversionResponse(BaseModel):
    amount: Decimal
    from_currency: str
    to_currency: str
    rate: Decimal
    converted_amount: Decimal
    formatted: str
