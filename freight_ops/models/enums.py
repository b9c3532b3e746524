"""
Shared enumerations for database models.

Statuses and payment modes are stored as database enums and
compared as enum members, never by their string names.
"""

import enum


class LTAStatus(str, enum.Enum):
    """Lifecycle of an air waybill."""
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMode(str, enum.Enum):
    """How the freight of an LTA is settled."""
    CASH = "CASH"
    TO_INVOICE = "TO_INVOICE"
    FREIGHT_COLLECT = "FREIGHT_COLLECT"
    PORT_DU = "PORT_DU"
    FREE = "FREE"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CHEQUE = "CHEQUE"
    MOBILE_MONEY = "MOBILE_MONEY"


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def increases_with_debit(self) -> bool:
        return self in (AccountType.ASSET, AccountType.EXPENSE)


class SourceType(str, enum.Enum):
    """Origin of a journal entry, for traceability."""
    INVOICE = "INVOICE"
    PAYMENT = "PAYMENT"
    LTA = "LTA"
    LTA_PAYMENT = "LTA_PAYMENT"
    TREASURY = "TREASURY"
    MANUAL = "MANUAL"
    ADJUSTMENT = "ADJUSTMENT"
    OPENING = "OPENING"
    CLOSING = "CLOSING"
