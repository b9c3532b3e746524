"""
LTA endpoints.

Thin HTTP layer over the LTAService. Creation returns the LTA
together with the outcome of its ledger posting, so a client
can see when the accounting side was skipped.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError
from freight_ops.models.base import get_db
from freight_ops.models.enums import LTAStatus
from freight_ops.services.lta_service import LTAService
from freight_ops.schemas.lta import (
    CostCalculationResponse,
    LTACreate,
    LTACreatedResponse,
    LTAResponse,
    LTAStatusUpdate,
    LTAUpdate,
    StatusHistoryResponse,
)

router = APIRouter(prefix="/lta", tags=["LTA"])


@router.post("", response_model=LTACreatedResponse, status_code=201)
def create_lta(
    request: LTACreate,
    db: Session = Depends(get_db),
):
    """
    Create an air waybill.

    The cost is computed from the route tariff (or the default
    rate) and the receivable is posted to the ledger. When the
    posting cannot be made the LTA is still created and
    posting_warning says why.
    """
    service = LTAService(db)
    try:
        result = service.create_lta(request)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    entry = result.posting.journal_entry
    return LTACreatedResponse(
        lta=LTAResponse.model_validate(result.lta),
        journal_entry_id=entry.id if entry else None,
        posting_warning=result.posting_warning,
    )


@router.get("", response_model=list[LTAResponse])
def list_ltas(
    status: LTAStatus | None = None,
    shipper: str | None = None,
    consignee: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    """List LTAs, newest first."""
    service = LTAService(db)
    ltas = service.list_ltas(status, shipper, consignee, limit, offset)
    db.commit()
    return ltas


@router.get("/calculate-cost", response_model=CostCalculationResponse)
def calculate_cost(
    origin_city_id: int,
    destination_city_id: int,
    weight: Decimal,
    db: Session = Depends(get_db),
):
    """Price a shipment without creating anything."""
    service = LTAService(db)
    try:
        cost = service.calculate_cost(origin_city_id, destination_city_id, weight)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CostCalculationResponse(
        origin_city_id=origin_city_id,
        destination_city_id=destination_city_id,
        weight=weight,
        calculated_cost=cost,
    )


@router.get(
    "/tracking/{tracking_number}/history",
    response_model=list[StatusHistoryResponse],
)
def get_status_history(
    tracking_number: str,
    db: Session = Depends(get_db),
):
    """Status changes of an LTA, oldest first. Empty for unknown numbers."""
    return LTAService(db).get_status_history(tracking_number)


@router.get("/tracking/{tracking_number}", response_model=LTAResponse)
def get_lta_by_tracking_number(
    tracking_number: str,
    db: Session = Depends(get_db),
):
    try:
        return LTAService(db).get_lta_by_tracking_number(tracking_number)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{lta_id}", response_model=LTAResponse)
def get_lta(lta_id: int, db: Session = Depends(get_db)):
    try:
        return LTAService(db).get_lta(lta_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{lta_id}", response_model=LTAResponse)
def update_lta(
    lta_id: int,
    request: LTAUpdate,
    db: Session = Depends(get_db),
):
    """
    Edit an LTA's shipment details.

    The stored cost is not recomputed. Use the status endpoint
    to change the status.
    """
    service = LTAService(db)
    try:
        lta = service.update_lta(lta_id, request)
        db.commit()
        return lta
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{lta_id}", status_code=204)
def delete_lta(lta_id: int, db: Session = Depends(get_db)):
    """Delete an LTA that has no recorded payments."""
    service = LTAService(db)
    try:
        service.delete_lta(lta_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{lta_id}/status", response_model=LTAResponse)
def update_lta_status(
    lta_id: int,
    request: LTAStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Move an LTA to a new status.

    Statuses only move forward; DELIVERED and CANCELLED are final.
    """
    service = LTAService(db)
    try:
        lta = service.update_status(
            lta_id, request.status, request.changed_by, request.reason
        )
        db.commit()
        return lta
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
