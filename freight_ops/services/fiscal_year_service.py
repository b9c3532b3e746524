"""
Fiscal year service.

Provides the open accounting period automatic postings are
dated in, and the usual create/close lifecycle.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError, ValidationError
from freight_ops.models.base import utcnow
from freight_ops.models.fiscal_year import FiscalYear
from freight_ops.schemas.accounting import FiscalYearCreate

logger = logging.getLogger(__name__)


class FiscalYearService:

    def __init__(self, db: Session):
        self.db = db

    def get_current_fiscal_year(self, today: date | None = None) -> FiscalYear | None:
        """Return the open fiscal year containing today, or None."""
        today = today or utcnow().date()
        return self.db.execute(
            select(FiscalYear).where(
                FiscalYear.start_date <= today,
                FiscalYear.end_date >= today,
                FiscalYear.is_closed.is_(False),
            )
        ).scalars().first()

    def create_fiscal_year(self, request: FiscalYearCreate) -> FiscalYear:
        """
        Open a new fiscal year.

        Years are unique by number and their date ranges may not
        overlap an existing year.
        """
        if request.end_date <= request.start_date:
            raise ValidationError("end_date must be after start_date")

        existing = self.db.execute(
            select(FiscalYear).where(
                FiscalYear.year_number == request.year_number
            )
        ).scalar_one_or_none()
        if existing:
            raise ValidationError(
                f"Fiscal year {request.year_number} already exists"
            )

        overlapping = self.db.execute(
            select(FiscalYear).where(
                FiscalYear.start_date <= request.end_date,
                FiscalYear.end_date >= request.start_date,
            )
        ).scalars().first()
        if overlapping:
            raise ValidationError(
                f"Fiscal year overlaps {overlapping.year_number}"
            )

        fiscal_year = FiscalYear(
            year_number=request.year_number,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        self.db.add(fiscal_year)
        self.db.flush()
        logger.info("Opened fiscal year %s", fiscal_year.year_number)
        return fiscal_year

    def get_or_create_current_fiscal_year(self, today: date | None = None) -> FiscalYear:
        """Return the current fiscal year, opening the calendar year if needed."""
        today = today or utcnow().date()
        current = self.get_current_fiscal_year(today)
        if current:
            return current
        return self.create_fiscal_year(FiscalYearCreate(
            year_number=today.year,
            start_date=date(today.year, 1, 1),
            end_date=date(today.year, 12, 31),
        ))

    def get_fiscal_year(self, fiscal_year_id: int) -> FiscalYear:
        fiscal_year = self.db.get(FiscalYear, fiscal_year_id)
        if not fiscal_year:
            raise NotFoundError(f"Fiscal year {fiscal_year_id} not found")
        return fiscal_year

    def close_fiscal_year(self, fiscal_year_id: int) -> FiscalYear:
        fiscal_year = self.get_fiscal_year(fiscal_year_id)
        if fiscal_year.is_closed:
            raise ValidationError(
                f"Fiscal year {fiscal_year.year_number} is already closed"
            )
        fiscal_year.is_closed = True
        self.db.flush()
        logger.info("Closed fiscal year %s", fiscal_year.year_number)
        return fiscal_year
