"""
Journal entry models.

A JournalEntry is the header of one double-entry posting; its
JournalLines carry the debits and credits. Within an entry the
sum of debits must equal the sum of credits. That invariant is
enforced by the LedgerService before anything is written, not
by the model.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freight_ops.models.base import Base, utcnow
from freight_ops.models.enums import SourceType


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False
    )
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    fiscal_year_id: Mapped[int] = mapped_column(
        ForeignKey("fiscal_years.id"), nullable=False, index=True
    )
    source_type: Mapped[SourceType | None] = mapped_column(
        SAEnum(SourceType, name="source_type_enum"),
        nullable=True,
    )
    source_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_debit: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    total_credit: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    fiscal_year: Mapped["FiscalYear"] = relationship()
    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.line_order",
    )

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    def __repr__(self) -> str:
        return f"<JournalEntry {self.entry_number} {self.total_debit}>"


class JournalLine(Base):
    """One debit or credit line of a journal entry."""

    __tablename__ = "journal_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    line_order: Mapped[int] = mapped_column(Integer, nullable=False)
    debit: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)

    journal_entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines"
    )
    account: Mapped["Account"] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return f"<JournalLine D={self.debit} C={self.credit}>"
