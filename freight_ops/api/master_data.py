"""
Reference data endpoints: cities, clients and route tariffs.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError
from freight_ops.models.base import get_db
from freight_ops.services.master_data_service import MasterDataService
from freight_ops.services.tariff_service import TariffService
from freight_ops.schemas.master_data import (
    CityCreate,
    CityResponse,
    ClientCreate,
    ClientResponse,
    TariffCreate,
    TariffResponse,
)

router = APIRouter(tags=["Master data"])


# --- Cities ---

@router.post("/cities", response_model=CityResponse, status_code=201)
def create_city(
    request: CityCreate,
    db: Session = Depends(get_db),
):
    service = MasterDataService(db)
    try:
        city = service.create_city(request)
        db.commit()
        return city
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/cities", response_model=list[CityResponse])
def list_cities(db: Session = Depends(get_db)):
    return MasterDataService(db).list_cities()


@router.get("/cities/{city_id}", response_model=CityResponse)
def get_city(city_id: int, db: Session = Depends(get_db)):
    try:
        return MasterDataService(db).get_city(city_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# --- Clients ---

@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(
    request: ClientCreate,
    db: Session = Depends(get_db),
):
    service = MasterDataService(db)
    try:
        client = service.create_client(request)
        db.commit()
        return client
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/clients", response_model=list[ClientResponse])
def list_clients(db: Session = Depends(get_db)):
    return MasterDataService(db).list_clients()


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, db: Session = Depends(get_db)):
    try:
        return MasterDataService(db).get_client(client_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# --- Tariffs ---

@router.post("/tariffs", response_model=TariffResponse, status_code=201)
def create_tariff(
    request: TariffCreate,
    db: Session = Depends(get_db),
):
    """Create the tariff of a route. A route has at most one tariff."""
    service = TariffService(db)
    try:
        tariff = service.create_tariff(request)
        db.commit()
        return tariff
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/tariffs", response_model=list[TariffResponse])
def list_active_tariffs(db: Session = Depends(get_db)):
    return TariffService(db).list_active_tariffs()


@router.post("/tariffs/{tariff_id}/deactivate", response_model=TariffResponse)
def deactivate_tariff(tariff_id: int, db: Session = Depends(get_db)):
    service = TariffService(db)
    try:
        tariff = service.deactivate_tariff(tariff_id)
        db.commit()
        return tariff
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
