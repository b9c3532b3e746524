"""
Accounting service: automatic double-entry postings.

Business events post their journal entry here:

    LTA created      DEBIT 411 Clients   CREDIT 701 Sales
    Payment recorded DEBIT 531 Cash      CREDIT 411 Clients

Posting is best-effort relative to the event that triggers it.
When the preconditions are missing (no open fiscal year, an
account absent from the chart) the event still succeeds and the
returned PostingResult carries a warning instead of an entry.
The warning is also logged so the accounting gap can be found
and reconciled later.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from freight_ops.config import get_settings
from freight_ops.models.base import utcnow
from freight_ops.models.enums import SourceType
from freight_ops.models.journal_entry import JournalEntry
from freight_ops.models.lta import LTA
from freight_ops.models.lta_payment import LTAPayment
from freight_ops.schemas.accounting import JournalEntryCreate, JournalLineCreate
from freight_ops.services.fiscal_year_service import FiscalYearService
from freight_ops.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


CLIENTS_ACCOUNT = "411"
SALES_ACCOUNT = "701"
CASH_ACCOUNT = "531"


@dataclass
class PostingResult:
    """Outcome of an automatic posting: an entry, or the reason there is none."""
    journal_entry: JournalEntry | None = None
    warning: str | None = None

    @property
    def posted(self) -> bool:
        return self.journal_entry is not None


class AccountingService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()
        self.ledger_service = LedgerService(db)
        self.fiscal_year_service = FiscalYearService(db)

    def post_lta_creation(self, lta: LTA) -> PostingResult:
        """Record the receivable and the sale for a new LTA."""
        party = lta.party_name
        return self._post_two_lines(
            label=f"LTA {lta.lta_number}",
            amount=lta.calculated_cost,
            debit_number=CLIENTS_ACCOUNT,
            credit_number=SALES_ACCOUNT,
            description=f"LTA creation {lta.lta_number} - {party}",
            reference=lta.lta_number,
            source_type=SourceType.LTA,
            source_id=lta.id,
            debit_label=f"Receivable LTA {lta.lta_number} - {party}",
            credit_label=f"Air freight sale LTA {lta.lta_number}",
        )

    def post_payment(
        self, payment: LTAPayment, lta: LTA | None = None
    ) -> PostingResult:
        """Record cash collected against an LTA receivable."""
        lta = lta or payment.lta
        return self._post_two_lines(
            label=f"payment {payment.reference}",
            amount=payment.amount,
            debit_number=CASH_ACCOUNT,
            credit_number=CLIENTS_ACCOUNT,
            description=f"Collection LTA {lta.lta_number}",
            reference=payment.reference,
            source_type=SourceType.LTA_PAYMENT,
            source_id=payment.id,
            debit_label=f"Collection LTA {lta.lta_number}",
            credit_label=f"Client payment LTA {lta.lta_number}",
        )

    def _post_two_lines(
        self,
        *,
        label: str,
        amount: Decimal | None,
        debit_number: str,
        credit_number: str,
        description: str,
        reference: str,
        source_type: SourceType,
        source_id: int,
        debit_label: str,
        credit_label: str,
    ) -> PostingResult:
        if amount is None or amount <= 0:
            return self._degraded(f"Nothing to post for {label}: amount is {amount}")

        fiscal_year = self.fiscal_year_service.get_current_fiscal_year()
        if fiscal_year is None:
            return self._degraded(f"No open fiscal year; {label} left unposted")

        debit_account = self.ledger_service.get_account_by_number(debit_number)
        credit_account = self.ledger_service.get_account_by_number(credit_number)
        missing = [
            number for number, account in (
                (debit_number, debit_account), (credit_number, credit_account),
            ) if account is None
        ]
        if missing:
            return self._degraded(
                f"Accounts {', '.join(missing)} not found; {label} left unposted"
            )

        try:
            entry = self.ledger_service.post_journal_entry(JournalEntryCreate(
                fiscal_year_id=fiscal_year.id,
                entry_date=utcnow().date(),
                description=description,
                reference=reference,
                source_type=source_type,
                source_id=source_id,
                created_by=self.settings.SYSTEM_USER,
                lines=[
                    JournalLineCreate(
                        account_id=debit_account.id,
                        debit=amount,
                        description=debit_label,
                    ),
                    JournalLineCreate(
                        account_id=credit_account.id,
                        credit=amount,
                        description=credit_label,
                    ),
                ],
            ))
        except ValueError as e:
            return self._degraded(f"Posting rejected for {label}: {e}")

        logger.info(
            "Posted %s for %s: D %s / C %s %s",
            entry.entry_number, label, debit_number, credit_number, amount,
        )
        return PostingResult(journal_entry=entry)

    def _degraded(self, warning: str) -> PostingResult:
        logger.warning(warning)
        return PostingResult(warning=warning)
