"""
Pydantic schemas for the chart of accounts and journal entries.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from freight_ops.models.enums import AccountType, SourceType


# --- Request Schemas ---

class AccountCreate(BaseModel):
    """Request to add an account to the chart of accounts."""
    number: str = Field(min_length=1, max_length=10)
    name: str = Field(min_length=1, max_length=150)
    account_type: AccountType
    parent_number: str | None = None


class FiscalYearCreate(BaseModel):
    year_number: int = Field(ge=1900, le=9999)
    start_date: date
    end_date: date


class JournalLineCreate(BaseModel):
    """One line of a journal entry: a debit or a credit, not both."""
    account_id: int
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)
    description: str = Field(min_length=1, max_length=255)


class JournalEntryCreate(BaseModel):
    """
    A complete posting: lines that must balance.

    fiscal_year_id and entry_date are resolved by the caller,
    source_type/source_id trace the entry back to its LTA or
    payment.
    """
    fiscal_year_id: int
    entry_date: date
    description: str = Field(min_length=1, max_length=500)
    reference: str | None = Field(default=None, max_length=100)
    source_type: SourceType = SourceType.MANUAL
    source_id: int | None = None
    created_by: str | None = None
    lines: list[JournalLineCreate] = Field(min_length=2)

    @field_validator("lines")
    @classmethod
    def must_have_debits_and_credits(cls, v: list) -> list:
        for line in v:
            if line.debit and line.credit:
                raise ValueError("a line cannot carry both a debit and a credit")
        if not any(line.debit for line in v) or not any(line.credit for line in v):
            raise ValueError(
                "entry must contain at least one debit and one credit"
            )
        return v


# --- Response Schemas ---

class AccountResponse(BaseModel):
    id: int
    number: str
    name: str
    account_type: AccountType
    parent_id: int | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class FiscalYearResponse(BaseModel):
    id: int
    year_number: int
    start_date: date
    end_date: date
    is_closed: bool

    model_config = {"from_attributes": True}


class JournalLineResponse(BaseModel):
    id: int
    account_id: int
    line_order: int
    debit: Decimal
    credit: Decimal
    description: str

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: int
    entry_number: str
    entry_date: date
    description: str
    reference: str | None
    fiscal_year_id: int
    source_type: SourceType | None
    source_id: int | None
    total_debit: Decimal
    total_credit: Decimal
    created_by: str | None
    lines: list[JournalLineResponse]

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    account_id: int
    account_number: str
    account_type: AccountType
    balance: Decimal


class TrialBalanceRow(BaseModel):
    account_number: str
    account_name: str
    total_debit: Decimal
    total_credit: Decimal
