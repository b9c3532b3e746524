"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch
the real database. Tables are created before and dropped
after every test.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from freight_ops.main import app
from freight_ops.models.base import Base, get_db, utcnow
from freight_ops.schemas.accounting import FiscalYearCreate
from freight_ops.schemas.master_data import CityCreate, ClientCreate, TariffCreate
from freight_ops.services.fiscal_year_service import FiscalYearService
from freight_ops.services.ledger_service import LedgerService
from freight_ops.services.master_data_service import MasterDataService
from freight_ops.services.tariff_service import TariffService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """Test client whose requests share the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Seed data ---

@pytest.fixture
def cities(db_session):
    """New York (NYC) and Paris (PAR)."""
    service = MasterDataService(db_session)
    nyc = service.create_city(
        CityCreate(name="New York", iata_code="NYC", country="USA")
    )
    par = service.create_city(
        CityCreate(name="Paris", iata_code="PAR", country="France")
    )
    db_session.commit()
    return nyc, par


@pytest.fixture
def acme(db_session):
    client = MasterDataService(db_session).create_client(
        ClientCreate(name="Acme Freight", email="billing@acme.test")
    )
    db_session.commit()
    return client


@pytest.fixture
def fiscal_year(db_session):
    """An open fiscal year covering today."""
    today = utcnow().date()
    fiscal_year = FiscalYearService(db_session).create_fiscal_year(
        FiscalYearCreate(
            year_number=today.year,
            start_date=date(today.year, 1, 1),
            end_date=date(today.year, 12, 31),
        )
    )
    db_session.commit()
    return fiscal_year


@pytest.fixture
def chart(db_session):
    accounts = LedgerService(db_session).seed_default_chart()
    db_session.commit()
    return {account.number: account for account in accounts}


@pytest.fixture
def books(fiscal_year, chart):
    """Everything automatic postings need: open year and chart."""
    return fiscal_year, chart


@pytest.fixture
def make_tariff(db_session):
    """Factory: make_tariff(origin, destination, "5.00")."""
    def _make(origin, destination, kg_rate):
        tariff = TariffService(db_session).create_tariff(TariffCreate(
            origin_city_id=origin.id,
            destination_city_id=destination.id,
            kg_rate=Decimal(kg_rate),
        ))
        db_session.commit()
        return tariff
    return _make
