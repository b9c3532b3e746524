"""
Pydantic schemas for cities, clients and tariffs.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


# --- City Schemas ---

class CityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    iata_code: str = Field(min_length=3, max_length=3)
    country: str = Field(min_length=1, max_length=100)

    @field_validator("iata_code")
    @classmethod
    def iata_code_must_be_letters(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("iata_code must contain letters only")
        return v.upper()


class CityResponse(BaseModel):
    id: int
    name: str
    iata_code: str
    country: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Client Schemas ---

class ClientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    address: str | None = Field(default=None, max_length=255)
    contact_number: str | None = Field(default=None, max_length=30)
    email: str | None = Field(default=None, max_length=255)
    contact_person: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class ClientResponse(BaseModel):
    id: int
    name: str
    address: str | None
    contact_number: str | None
    email: str | None
    contact_person: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Tariff Schemas ---

class TariffCreate(BaseModel):
    origin_city_id: int
    destination_city_id: int
    kg_rate: Decimal = Field(gt=0, decimal_places=2)
    volume_coeff_v1: Decimal = Field(default=Decimal("0"), ge=0)
    volume_coeff_v2: Decimal = Field(default=Decimal("0"), ge=0)
    volume_coeff_v3: Decimal = Field(default=Decimal("0"), ge=0)
    effective_from: datetime | None = None
    effective_until: datetime | None = None


class TariffResponse(BaseModel):
    id: int
    origin_city_id: int
    destination_city_id: int
    kg_rate: Decimal
    is_active: bool
    effective_from: datetime | None
    effective_until: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}
