"""
Accounting endpoints: chart of accounts, fiscal years and
journal entries.

Automatic entries are created by the LTA and payment flows.
Manual entries go through the same LedgerService checks.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError
from freight_ops.models.account import Account
from freight_ops.models.base import get_db
from freight_ops.models.enums import SourceType
from freight_ops.services.fiscal_year_service import FiscalYearService
from freight_ops.services.ledger_service import LedgerService
from freight_ops.schemas.accounting import (
    AccountBalanceResponse,
    AccountCreate,
    AccountResponse,
    FiscalYearCreate,
    FiscalYearResponse,
    JournalEntryCreate,
    JournalEntryResponse,
    TrialBalanceRow,
)

router = APIRouter(prefix="/accounting", tags=["Accounting"])


# --- Chart of accounts ---

@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    service = LedgerService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/accounts/seed", response_model=list[AccountResponse], status_code=201
)
def seed_default_chart(db: Session = Depends(get_db)):
    """Create the default chart of accounts. Existing accounts are kept."""
    created = LedgerService(db).seed_default_chart()
    db.commit()
    return created


@router.get(
    "/accounts/{account_id}/balance",
    response_model=AccountBalanceResponse,
)
def get_account_balance(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Balance derived from the account's journal lines."""
    service = LedgerService(db)
    try:
        balance = service.get_account_balance(account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    account = db.get(Account, account_id)
    return AccountBalanceResponse(
        account_id=account.id,
        account_number=account.number,
        account_type=account.account_type,
        balance=balance,
    )


# --- Fiscal years ---

@router.post(
    "/fiscal-years", response_model=FiscalYearResponse, status_code=201
)
def create_fiscal_year(
    request: FiscalYearCreate,
    db: Session = Depends(get_db),
):
    service = FiscalYearService(db)
    try:
        fiscal_year = service.create_fiscal_year(request)
        db.commit()
        return fiscal_year
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/fiscal-years/current", response_model=FiscalYearResponse)
def get_current_fiscal_year(db: Session = Depends(get_db)):
    fiscal_year = FiscalYearService(db).get_current_fiscal_year()
    if not fiscal_year:
        raise HTTPException(status_code=404, detail="No open fiscal year")
    return fiscal_year


@router.post(
    "/fiscal-years/{fiscal_year_id}/close",
    response_model=FiscalYearResponse,
)
def close_fiscal_year(fiscal_year_id: int, db: Session = Depends(get_db)):
    service = FiscalYearService(db)
    try:
        fiscal_year = service.close_fiscal_year(fiscal_year_id)
        db.commit()
        return fiscal_year
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/fiscal-years/{fiscal_year_id}/trial-balance",
    response_model=list[TrialBalanceRow],
)
def get_trial_balance(fiscal_year_id: int, db: Session = Depends(get_db)):
    return LedgerService(db).get_trial_balance(fiscal_year_id)


# --- Journal entries ---

@router.post(
    "/journal-entries", response_model=JournalEntryResponse, status_code=201
)
def post_journal_entry(
    request: JournalEntryCreate,
    db: Session = Depends(get_db),
):
    """
    Post a manual journal entry.

    Total debits must equal total credits and the entry date must
    fall inside the open fiscal year.
    """
    service = LedgerService(db)
    try:
        entry = service.post_journal_entry(request)
        db.commit()
        return entry
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/journal-entries/{entry_id}", response_model=JournalEntryResponse
)
def get_journal_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        return LedgerService(db).get_journal_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get(
    "/journal-entries/source/{source_type}/{source_id}",
    response_model=list[JournalEntryResponse],
)
def get_entries_by_source(
    source_type: SourceType,
    source_id: int,
    db: Session = Depends(get_db),
):
    """Entries generated by one LTA or payment."""
    return LedgerService(db).get_entries_by_source(source_type, source_id)
