"""
LTA payment endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError
from freight_ops.models.base import get_db
from freight_ops.services.payment_service import PaymentService
from freight_ops.schemas.payment import (
    LTAPaymentOverview,
    PaymentRequest,
    PaymentResponse,
    PaymentSummary,
    RemainingAmount,
    UnpaidLTA,
)

router = APIRouter(prefix="/lta-payments", tags=["LTA payments"])


@router.post("", response_model=PaymentSummary, status_code=201)
def record_payment(
    request: PaymentRequest,
    db: Session = Depends(get_db),
):
    """
    Record a payment against an LTA.

    The amount may not exceed what remains to be paid. The cash
    box, when given, is credited in the same transaction.
    """
    service = PaymentService(db)
    try:
        summary = service.record_payment(
            request.lta_id,
            request.amount,
            request.payment_method,
            cash_box_id=request.cash_box_id,
            notes=request.notes,
        )
        db.commit()
        return summary
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/unpaid", response_model=list[UnpaidLTA])
def get_unpaid_ltas(db: Session = Depends(get_db)):
    """Counter-payable LTAs with an outstanding balance."""
    return PaymentService(db).get_unpaid_ltas()


@router.get("/lta/{lta_id}", response_model=list[PaymentResponse])
def get_payments_by_lta(lta_id: int, db: Session = Depends(get_db)):
    return PaymentService(db).get_payments_by_lta(lta_id)


@router.get("/lta/{lta_id}/remaining", response_model=RemainingAmount)
def get_remaining_amount(lta_id: int, db: Session = Depends(get_db)):
    try:
        return PaymentService(db).calculate_remaining_amount(lta_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/lta/{lta_id}/summary", response_model=LTAPaymentOverview)
def get_payment_summary(lta_id: int, db: Session = Depends(get_db)):
    try:
        return PaymentService(db).get_payment_summary(lta_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
