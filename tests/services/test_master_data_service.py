"""
Tests for cities and clients.
"""

import pytest

from freight_ops.exceptions import NotFoundError, ValidationError
from freight_ops.schemas.master_data import CityCreate, ClientCreate
from freight_ops.services.master_data_service import MasterDataService


class TestCities:

    def test_iata_code_upper_cased(self, db_session):
        city = MasterDataService(db_session).create_city(
            CityCreate(name="Kinshasa", iata_code="fih", country="DR Congo")
        )
        assert city.iata_code == "FIH"

    def test_duplicate_iata_rejected(self, db_session, cities):
        with pytest.raises(ValidationError, match="already exists"):
            MasterDataService(db_session).create_city(
                CityCreate(name="Newark", iata_code="nyc", country="USA")
            )

    def test_iata_code_must_be_letters(self):
        with pytest.raises(ValueError):
            CityCreate(name="Nowhere", iata_code="N1C", country="USA")

    def test_lookups(self, db_session, cities):
        nyc, par = cities
        service = MasterDataService(db_session)

        assert service.get_city_by_iata("par").id == par.id
        assert service.find_city(9999) is None
        assert [c.iata_code for c in service.list_cities()] == ["NYC", "PAR"]
        with pytest.raises(NotFoundError):
            service.get_city(9999)


class TestClients:

    def test_create_and_get(self, db_session, acme):
        service = MasterDataService(db_session)
        assert service.get_client(acme.id).name == "Acme Freight"
        assert [c.id for c in service.list_clients()] == [acme.id]

    def test_unknown_client(self, db_session):
        service = MasterDataService(db_session)
        assert service.find_client(None) is None
        with pytest.raises(NotFoundError):
            service.get_client(9999)

    def test_inactive_client_hidden_from_list(self, db_session, acme):
        service = MasterDataService(db_session)
        service.create_client(ClientCreate(name="Dormant Ltd"))
        acme.is_active = False
        db_session.commit()

        assert [c.name for c in service.list_clients()] == ["Dormant Ltd"]
        assert len(service.list_clients(active_only=False)) == 2
