"""
Pydantic schemas for LTA operations.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
are often different.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from freight_ops.models.enums import LTAStatus, PaymentMode


# --- Request Schemas ---

class LTACreate(BaseModel):
    """Request to create an air waybill."""
    origin_city_id: int
    destination_city_id: int
    payment_mode: PaymentMode
    client_id: int | None = None
    total_weight: Decimal = Field(gt=0, decimal_places=2)
    package_nature: str | None = Field(default=None, max_length=255)
    package_count: int | None = Field(default=None, ge=0)
    status: LTAStatus | None = None
    shipper_name: str | None = Field(default=None, max_length=150)
    shipper_address: str | None = Field(default=None, max_length=255)
    consignee_name: str | None = Field(default=None, max_length=150)
    consignee_address: str | None = Field(default=None, max_length=255)
    special_instructions: str | None = None
    declared_value: Decimal | None = Field(default=None, ge=0)
    pickup_date: datetime | None = None
    delivery_date: datetime | None = None


class LTAUpdate(BaseModel):
    """
    Request to edit an LTA.

    Only the fields sent are changed. Status moves go through
    the status endpoint so that every change is kept in history.
    """
    lta_number: str | None = Field(default=None, min_length=1, max_length=50)
    total_weight: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    package_nature: str | None = Field(default=None, max_length=255)
    package_count: int | None = Field(default=None, ge=0)
    shipper_name: str | None = Field(default=None, max_length=150)
    shipper_address: str | None = Field(default=None, max_length=255)
    consignee_name: str | None = Field(default=None, max_length=150)
    consignee_address: str | None = Field(default=None, max_length=255)
    special_instructions: str | None = None
    declared_value: Decimal | None = Field(default=None, ge=0)
    pickup_date: datetime | None = None
    delivery_date: datetime | None = None

    model_config = {"extra": "forbid"}


class LTAStatusUpdate(BaseModel):
    """Request to move an LTA to a new status."""
    status: LTAStatus
    changed_by: str | None = Field(default=None, max_length=100)
    reason: str | None = Field(default=None, max_length=500)


# --- Response Schemas ---

class LTAResponse(BaseModel):
    id: int
    lta_number: str
    tracking_number: str
    qr_code: str | None
    origin_city_id: int
    destination_city_id: int
    payment_mode: PaymentMode
    client_id: int | None
    total_weight: Decimal
    package_nature: str | None
    package_count: int | None
    calculated_cost: Decimal | None
    declared_value: Decimal | None
    status: LTAStatus
    shipper_name: str | None
    consignee_name: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LTACreatedResponse(BaseModel):
    """Created LTA plus the outcome of its automatic ledger posting."""
    lta: LTAResponse
    journal_entry_id: int | None
    posting_warning: str | None


class StatusHistoryResponse(BaseModel):
    id: int
    lta_id: int
    previous_status: LTAStatus | None
    new_status: LTAStatus
    changed_by: str | None
    change_reason: str | None
    changed_at: datetime

    model_config = {"from_attributes": True}


class CostCalculationResponse(BaseModel):
    origin_city_id: int
    destination_city_id: int
    weight: Decimal
    calculated_cost: Decimal
