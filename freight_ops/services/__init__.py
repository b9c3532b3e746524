"""Business logic services."""

from freight_ops.services.master_data_service import MasterDataService
from freight_ops.services.tariff_service import TariffService
from freight_ops.services.fiscal_year_service import FiscalYearService
from freight_ops.services.ledger_service import LedgerService
from freight_ops.services.accounting_service import AccountingService
from freight_ops.services.lta_service import LTAService
from freight_ops.services.treasury_service import TreasuryService
from freight_ops.services.payment_service import PaymentService
from freight_ops.services.currency_service import CurrencyService

__all__ = [
    "MasterDataService",
    "TariffService",
    "FiscalYearService",
    "LedgerService",
    "AccountingService",
    "LTAService",
    "TreasuryService",
    "PaymentService",
    "CurrencyService",
]
