"""
Pydantic schemas for LTA payments.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from freight_ops.models.enums import LTAStatus, PaymentMethod, PaymentMode


class PaymentRequest(BaseModel):
    """
    Request to record a payment against an LTA.

    Amount bounds are checked by the PaymentService, not here,
    so the rule lives in one place for API and direct callers.
    """
    lta_id: int | None = None
    amount: Decimal | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    cash_box_id: int | None = None
    notes: str | None = Field(default=None, max_length=500)


class PaymentSummary(BaseModel):
    """Outcome of a recorded payment."""
    payment_id: int
    lta_id: int
    amount: Decimal
    payment_method: PaymentMethod
    reference: str
    remaining_amount: Decimal
    payment_date: date
    journal_entry_id: int | None = None
    posting_warning: str | None = None


class RemainingAmount(BaseModel):
    lta_id: int
    total_cost: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    is_fully_paid: bool


class PaymentResponse(BaseModel):
    id: int
    lta_id: int
    amount: Decimal
    payment_date: date
    payment_method: PaymentMethod
    reference: str
    debit_account: str | None
    credit_account: str | None
    journal_entry_id: int | None
    cash_box_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class LTAPaymentOverview(BaseModel):
    """Payment history and balance of one LTA."""
    lta_id: int
    total_cost: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    is_fully_paid: bool
    payments: list[PaymentResponse]


class UnpaidLTA(BaseModel):
    id: int
    lta_number: str
    tracking_number: str
    payment_mode: PaymentMode
    status: LTAStatus
    calculated_cost: Decimal
    remaining_amount: Decimal
