"""
Fiscal year model.

The open fiscal year is the accounting period every automatic
journal entry is dated in.
"""

from datetime import date, datetime

from sqlalchemy import Integer, Boolean, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from freight_ops.models.base import Base, utcnow


class FiscalYear(Base):
    __tablename__ = "fiscal_years"

    id: Mapped[int] = mapped_column(primary_key=True)
    year_number: Mapped[int] = mapped_column(
        Integer, unique=True, nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_closed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def contains_date(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        state = "closed" if self.is_closed else "open"
        return f"<FiscalYear {self.year_number} ({state})>"
