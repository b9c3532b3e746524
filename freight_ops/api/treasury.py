"""
Treasury endpoints: cash boxes, exchange rates and conversion.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError
from freight_ops.models.base import get_db
from freight_ops.services.currency_service import CurrencyService
from freight_ops.services.treasury_service import TreasuryService
from freight_ops.schemas.treasury import (
    CashBoxCreate,
    CashBoxResponse,
    CashOperation,
    ConversionResponse,
    ExchangeRateUpdate,
)

router = APIRouter(prefix="/treasury", tags=["Treasury"])


# --- Cash boxes ---

@router.post("/cash-boxes", response_model=CashBoxResponse, status_code=201)
def create_cash_box(
    request: CashBoxCreate,
    db: Session = Depends(get_db),
):
    service = TreasuryService(db)
    try:
        cash_box = service.create_cash_box(request)
        db.commit()
        return cash_box
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/cash-boxes", response_model=list[CashBoxResponse])
def list_cash_boxes(db: Session = Depends(get_db)):
    return TreasuryService(db).list_cash_boxes()


@router.get("/cash-boxes/{cash_box_id}", response_model=CashBoxResponse)
def get_cash_box(cash_box_id: int, db: Session = Depends(get_db)):
    try:
        return TreasuryService(db).get_cash_box(cash_box_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _cash_operation(operation, cash_box_id: int, request: CashOperation, db):
    try:
        cash_box = operation(cash_box_id, request.amount, request.description)
        db.commit()
        return cash_box
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/cash-boxes/{cash_box_id}/deposit", response_model=CashBoxResponse
)
def deposit(
    cash_box_id: int,
    request: CashOperation,
    db: Session = Depends(get_db),
):
    return _cash_operation(TreasuryService(db).deposit, cash_box_id, request, db)


@router.post(
    "/cash-boxes/{cash_box_id}/withdraw", response_model=CashBoxResponse
)
def withdraw(
    cash_box_id: int,
    request: CashOperation,
    db: Session = Depends(get_db),
):
    """Take money out of a cash box. Overdrawing is rejected with 400."""
    return _cash_operation(TreasuryService(db).withdraw, cash_box_id, request, db)


# --- Currencies ---

@router.put("/exchange-rates")
def update_exchange_rate(
    request: ExchangeRateUpdate,
    db: Session = Depends(get_db),
):
    service = CurrencyService(db)
    try:
        rate = service.update_exchange_rate(
            request.from_currency,
            request.to_currency,
            request.rate,
            request.updated_by,
        )
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "from_currency": rate.from_currency,
        "to_currency": rate.to_currency,
        "rate": rate.rate,
        "effective_date": rate.effective_date,
    }


@router.get("/convert", response_model=ConversionResponse)
def convert(
    amount: Decimal,
    from_currency: str,
    to_currency: str,
    db: Session = Depends(get_db),
):
    service = CurrencyService(db)
    try:
        converted = service.convert(amount, from_currency, to_currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ConversionResponse(
        amount=amount,
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
        rate=service.get_exchange_rate(from_currency, to_currency),
        converted_amount=converted,
        formatted=service.format_amount(converted, to_currency),
    )
