"""
Master data service: cities and clients.

Cities and clients are plain reference data. The LTA workflow
only needs id lookups from here; creation exists so the data
can be loaded through the same validation rules.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError, ValidationError
from freight_ops.models.city import City
from freight_ops.models.client import Client
from freight_ops.schemas.master_data import CityCreate, ClientCreate

logger = logging.getLogger(__name__)


class MasterDataService:

    def __init__(self, db: Session):
        self.db = db

    # --- Cities ---

    def create_city(self, request: CityCreate) -> City:
        """Create a city. The IATA code must be unique."""
        iata_code = request.iata_code.upper()
        existing = self.db.execute(
            select(City).where(City.iata_code == iata_code)
        ).scalar_one_or_none()

        if existing:
            raise ValidationError(
                f"City with IATA code '{iata_code}' already exists"
            )

        city = City(
            name=request.name,
            iata_code=iata_code,
            country=request.country,
        )
        self.db.add(city)
        self.db.flush()
        logger.info("Created city %s (%s)", city.iata_code, city.name)
        return city

    def find_city(self, city_id: int | None) -> City | None:
        if city_id is None:
            return None
        return self.db.get(City, city_id)

    def get_city(self, city_id: int) -> City:
        city = self.find_city(city_id)
        if not city:
            raise NotFoundError(f"City {city_id} not found")
        return city

    def get_city_by_iata(self, iata_code: str) -> City:
        city = self.db.execute(
            select(City).where(City.iata_code == iata_code.upper())
        ).scalar_one_or_none()
        if not city:
            raise NotFoundError(f"City with IATA code '{iata_code}' not found")
        return city

    def list_cities(self, active_only: bool = True) -> list[City]:
        stmt = select(City).order_by(City.name)
        if active_only:
            stmt = stmt.where(City.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    # --- Clients ---

    def create_client(self, request: ClientCreate) -> Client:
        client = Client(
            name=request.name,
            address=request.address,
            contact_number=request.contact_number,
            email=request.email,
            contact_person=request.contact_person,
            notes=request.notes,
        )
        self.db.add(client)
        self.db.flush()
        logger.info("Created client %s", client.name)
        return client

    def find_client(self, client_id: int | None) -> Client | None:
        if client_id is None:
            return None
        return self.db.get(Client, client_id)

    def get_client(self, client_id: int) -> Client:
        client = self.find_client(client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found")
        return client

    def list_clients(self, active_only: bool = True) -> list[Client]:
        stmt = select(Client).order_by(Client.name)
        if active_only:
            stmt = stmt.where(Client.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())
