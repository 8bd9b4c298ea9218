# tests/conftest.py
"""
Shared fixtures. Every test gets a fresh in-memory SQLite database built from the models.
DATABASE_URL is forced to SQLite before any app module creates its engine.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables
from app.services.catalog_service import add_service_area, create_service, create_vendor_profile
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext
from app.services.vehicle_service import create_vehicle


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def gateway(db):
    return DataGateway(db)


@pytest.fixture
def customer():
    return SessionContext(identity_id="cust-0001", email="carol@example.com")


@pytest.fixture
def other_customer():
    return SessionContext(identity_id="cust-0002", email="dave@example.com")


@pytest.fixture
def vendor(gateway):
    """A registered vendor serving ZIP 94107."""
    session = SessionContext(identity_id="vend-0001", role="vendor", email="spotless@example.com")
    create_vendor_profile(gateway, session, business_name="Spotless Mobile Wash", service_radius=10)
    add_service_area(gateway, session, "94107")
    return session


@pytest.fixture
def listing(gateway, vendor):
    return create_service(gateway, vendor, {
        "name": "Premium Wash",
        "description": "Hand wash, wax and tyre shine",
        "service_type": "premium_wash",
        "price": "49.99",
        "duration": 90,
    })


@pytest.fixture
def vehicle(gateway, customer):
    return create_vehicle(gateway, customer, {
        "make": "Honda", "model": "Civic", "year": 2019, "color": "Grey", "license_plate": "XYZ789",
    })


@pytest.fixture
def other_vehicle(gateway, other_customer):
    return create_vehicle(gateway, other_customer, {
        "make": "Ford", "model": "F-150", "year": 2021, "color": "Black",
        "license_plate": "TRK001", "vehicle_type": "truck",
    })
