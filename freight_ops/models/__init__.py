"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from freight_ops.models.base import Base
from freight_ops.models.enums import (
    LTAStatus,
    PaymentMode,
    PaymentMethod,
    AccountType,
    SourceType,
)
from freight_ops.models.city import City
from freight_ops.models.client import Client
from freight_ops.models.tariff import Tariff
from freight_ops.models.lta import LTA
from freight_ops.models.lta_status_history import LTAStatusHistory
from freight_ops.models.cash_box import CashBox
from freight_ops.models.account import Account
from freight_ops.models.fiscal_year import FiscalYear
from freight_ops.models.journal_entry import JournalEntry, JournalLine
from freight_ops.models.lta_payment import LTAPayment
from freight_ops.models.currency import Currency, ExchangeRate

__all__ = [
    "Base",
    "LTAStatus",
    "PaymentMode",
    "PaymentMethod",
    "AccountType",
    "SourceType",
    "City",
    "Client",
    "Tariff",
    "LTA",
    "LTAStatusHistory",
    "CashBox",
    "Account",
    "FiscalYear",
    "JournalEntry",
    "JournalLine",
    "LTAPayment",
    "Currency",
    "ExchangeRate",
]
