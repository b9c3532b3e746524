"""
LTA payment model.

A cash collection against an LTA. The payment keeps the
account codes it was posted with and, when the ledger posting
succeeded, the journal entry that records it.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Numeric, ForeignKey, Text,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freight_ops.models.base import Base, utcnow
from freight_ops.models.enums import PaymentMethod


class LTAPayment(Base):
    __tablename__ = "lta_payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    lta_id: Mapped[int] = mapped_column(
        ForeignKey("ltas.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False
    )
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        SAEnum(
            PaymentMethod,
            name="payment_method_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    reference: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False
    )
    debit_account: Mapped[str | None] = mapped_column(
        String(10), nullable=True
    )
    credit_account: Mapped[str | None] = mapped_column(
        String(10), nullable=True
    )
    journal_entry_id: Mapped[int | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True
    )
    cash_box_id: Mapped[int | None] = mapped_column(
        ForeignKey("cash_boxes.id"), nullable=True, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    lta: Mapped["LTA"] = relationship(back_populates="payments")
    cash_box: Mapped["CashBox | None"] = relationship()

    def __repr__(self) -> str:
        return f"<LTAPayment {self.reference} {self.amount}>"
