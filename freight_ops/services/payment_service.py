"""
Payment service: cash collected against LTAs.

Recording a payment:
1. Validates the amount against what is still owed on the LTA
2. Generates a unique accounting reference
3. Credits the cash box when one is given
4. Persists the LTAPayment row
5. Posts D 531 Cash / C 411 Clients through the AccountingService

Steps 1 to 4 either all happen or raise. Step 5 is best-effort
and reports its outcome in the summary's posting_warning.
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError, ValidationError
from freight_ops.models.base import utcnow
from freight_ops.models.enums import LTAStatus, PaymentMethod, PaymentMode
from freight_ops.models.lta import LTA
from freight_ops.models.lta_payment import LTAPayment
from freight_ops.schemas.payment import PaymentSummary
from freight_ops.services.accounting_service import (
    AccountingService,
    CASH_ACCOUNT,
    CLIENTS_ACCOUNT,
)
from freight_ops.services.pricing import to_money
from freight_ops.services.treasury_service import TreasuryService

logger = logging.getLogger(__name__)


PAYABLE_STATUSES = frozenset({
    LTAStatus.CONFIRMED,
    LTAStatus.IN_TRANSIT,
    LTAStatus.DELIVERED,
})

# Modes settled at the counter; TO_INVOICE goes through invoicing
PAYABLE_MODES = frozenset({PaymentMode.CASH, PaymentMode.PORT_DU})


class PaymentService:

    def __init__(self, db: Session):
        self.db = db
        self.accounting_service = AccountingService(db)
        self.treasury_service = TreasuryService(db)

    def record_payment(
        self,
        lta_id: int | None,
        amount: Decimal | None,
        method: PaymentMethod = PaymentMethod.CASH,
        cash_box_id: int | None = None,
        notes: str | None = None,
    ) -> PaymentSummary:
        """
        Record a payment against an LTA.

        Raises:
            ValidationError: missing LTA id or amount, amount <= 0,
                amount with more than 2 decimal places,
                or amount greater than what remains to be paid
            NotFoundError: LTA or cash box does not exist
        """
        if lta_id is None:
            raise ValidationError("LTA id is required")
        if amount is None:
            raise ValidationError("Payment amount is required")
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")
        if amount != to_money(amount):
            raise ValidationError(
                f"Payment amount {amount} has more than 2 decimal places"
            )
        amount = to_money(amount)

        lta = self.db.get(LTA, lta_id)
        if not lta:
            raise NotFoundError(f"LTA {lta_id} not found")
        if lta.calculated_cost is None:
            raise ValidationError(f"LTA {lta.lta_number} has no calculated cost")

        total_paid = self._total_paid(lta.id)
        remaining = to_money(lta.calculated_cost - total_paid)
        if amount > remaining:
            raise ValidationError(
                f"Payment amount {amount} exceeds cost {lta.calculated_cost} "
                f"of LTA {lta.lta_number} (remaining {remaining})"
            )

        payment_date = utcnow().date()
        reference = self._generate_reference(lta.id, payment_date)

        if cash_box_id is not None:
            self.treasury_service.deposit(
                cash_box_id, amount, f"Collection {reference}"
            )

        payment = LTAPayment(
            lta_id=lta.id,
            amount=amount,
            payment_date=payment_date,
            payment_method=method,
            reference=reference,
            debit_account=CASH_ACCOUNT,
            credit_account=CLIENTS_ACCOUNT,
            cash_box_id=cash_box_id,
            notes=notes,
        )
        payment.lta = lta
        self.db.add(payment)
        self.db.flush()
        logger.info(
            "Recorded payment %s of %s on LTA %s",
            reference, amount, lta.lta_number,
        )

        posting = self.accounting_service.post_payment(payment, lta)
        if posting.posted:
            payment.journal_entry_id = posting.journal_entry.id
            self.db.flush()

        return PaymentSummary(
            payment_id=payment.id,
            lta_id=lta.id,
            amount=amount,
            payment_method=method,
            reference=reference,
            remaining_amount=to_money(remaining - amount),
            payment_date=payment_date,
            journal_entry_id=payment.journal_entry_id,
            posting_warning=posting.warning,
        )

    def _generate_reference(self, lta_id: int, payment_date: date) -> str:
        """PAY-YYYYMMDD-NNNNN-<lta id>, sequenced per payment date."""
        sequence = self.db.execute(
            select(func.count(LTAPayment.id)).where(
                LTAPayment.payment_date == payment_date
            )
        ).scalar_one() + 1

        while True:
            reference = (
                f"PAY-{payment_date:%Y%m%d}-{sequence:05d}-{lta_id}"
            )
            taken = self.db.execute(
                select(LTAPayment.id).where(LTAPayment.reference == reference)
            ).first()
            if taken is None:
                return reference
            sequence += 1

    def _total_paid(self, lta_id: int) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(LTAPayment.amount), 0)).where(
                LTAPayment.lta_id == lta_id
            )
        ).scalar_one()
        return to_money(total)

    # --- Queries ---

    @staticmethod
    def is_eligible_for_payment(lta: LTA) -> bool:
        """Counter-payable: priced, confirmed or later, CASH or PORT_DU."""
        return (
            lta.calculated_cost is not None
            and lta.calculated_cost > 0
            and lta.status in PAYABLE_STATUSES
            and lta.payment_mode in PAYABLE_MODES
        )

    def get_unpaid_ltas(self) -> list[dict]:
        """Eligible LTAs with something left to pay, newest first."""
        ltas = self.db.execute(
            select(LTA)
            .where(
                LTA.calculated_cost.is_not(None),
                LTA.calculated_cost > 0,
                LTA.status.in_(list(PAYABLE_STATUSES)),
                LTA.payment_mode.in_(list(PAYABLE_MODES)),
            )
            .order_by(LTA.created_at.desc(), LTA.id.desc())
        ).scalars().all()

        unpaid = []
        for lta in ltas:
            remaining = to_money(lta.calculated_cost - self._total_paid(lta.id))
            if remaining > 0:
                unpaid.append({
                    "id": lta.id,
                    "lta_number": lta.lta_number,
                    "tracking_number": lta.tracking_number,
                    "payment_mode": lta.payment_mode,
                    "status": lta.status,
                    "calculated_cost": lta.calculated_cost,
                    "remaining_amount": remaining,
                })
        return unpaid

    def calculate_remaining_amount(self, lta_id: int) -> dict:
        lta = self.db.get(LTA, lta_id)
        if not lta:
            raise NotFoundError(f"LTA {lta_id} not found")

        total_cost = to_money(lta.calculated_cost or 0)
        total_paid = self._total_paid(lta_id)
        remaining = to_money(total_cost - total_paid)
        return {
            "lta_id": lta_id,
            "total_cost": total_cost,
            "total_paid": total_paid,
            "remaining_amount": remaining,
            "is_fully_paid": remaining <= 0,
        }

    def get_payments_by_lta(self, lta_id: int) -> list[LTAPayment]:
        return list(self.db.execute(
            select(LTAPayment)
            .where(LTAPayment.lta_id == lta_id)
            .order_by(LTAPayment.created_at, LTAPayment.id)
        ).scalars().all())

    def get_payment_summary(self, lta_id: int) -> dict:
        summary = self.calculate_remaining_amount(lta_id)
        summary["payments"] = self.get_payments_by_lta(lta_id)
        return summary
