"""
Treasury service: cash boxes.

Cash box balances are read and written inside the caller's
transaction, together with the event that moves the money.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from freight_ops.exceptions import (
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from freight_ops.models.cash_box import CashBox
from freight_ops.schemas.treasury import CashBoxCreate
from freight_ops.services.pricing import to_money

logger = logging.getLogger(__name__)


class TreasuryService:

    def __init__(self, db: Session):
        self.db = db

    def create_cash_box(self, request: CashBoxCreate) -> CashBox:
        existing = self.db.execute(
            select(CashBox).where(CashBox.name == request.name)
        ).scalar_one_or_none()
        if existing:
            raise ValidationError(f"Cash box '{request.name}' already exists")

        cash_box = CashBox(
            name=request.name,
            currency=request.currency.upper(),
            balance=to_money(request.opening_balance),
        )
        self.db.add(cash_box)
        self.db.flush()
        return cash_box

    def get_cash_box(self, cash_box_id: int) -> CashBox:
        cash_box = self.db.get(CashBox, cash_box_id)
        if not cash_box:
            raise NotFoundError(f"Cash box {cash_box_id} not found")
        return cash_box

    def list_cash_boxes(self) -> list[CashBox]:
        return list(self.db.execute(
            select(CashBox).order_by(CashBox.name)
        ).scalars().all())

    def deposit(
        self, cash_box_id: int, amount: Decimal, description: str | None = None
    ) -> CashBox:
        """Add money to a cash box."""
        cash_box = self._get_active(cash_box_id)
        amount = self._validate_amount(amount)

        cash_box.balance = to_money(cash_box.balance + amount)
        self.db.flush()
        logger.info(
            "Cash box %s +%s (%s), balance %s",
            cash_box.name, amount, description or "deposit", cash_box.balance,
        )
        return cash_box

    def withdraw(
        self, cash_box_id: int, amount: Decimal, description: str | None = None
    ) -> CashBox:
        """
        Take money out of a cash box.

        Raises InsufficientFundsError if the balance would go negative.
        """
        cash_box = self._get_active(cash_box_id)
        amount = self._validate_amount(amount)

        if cash_box.balance < amount:
            raise InsufficientFundsError(
                f"Insufficient funds in cash box {cash_box.name}: "
                f"balance={cash_box.balance}, requested={amount}"
            )

        cash_box.balance = to_money(cash_box.balance - amount)
        self.db.flush()
        logger.info(
            "Cash box %s -%s (%s), balance %s",
            cash_box.name, amount, description or "withdrawal", cash_box.balance,
        )
        return cash_box

    def _get_active(self, cash_box_id: int) -> CashBox:
        cash_box = self.get_cash_box(cash_box_id)
        if not cash_box.is_active:
            raise ValidationError(f"Cash box {cash_box.name} is not active")
        return cash_box

    @staticmethod
    def _validate_amount(amount) -> Decimal:
        if amount is None or Decimal(str(amount)) <= 0:
            raise ValidationError("Amount must be positive")
        return to_money(amount)
