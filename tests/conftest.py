import pytest
from fastapi.testclient import TestClient

from arthavidhi.core.config import Settings
from arthavidhi.core.db import Database, run_migrations
from arthavidhi.main import create_app
from arthavidhi.services.user_service import ensure_default_user


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", DEFAULT_USER_ID=1, LOG_LEVEL="WARNING")


@pytest.fixture
def database(settings):
    database = Database(settings.DATABASE_URL)
    run_migrations(database.engine)
    yield database
    database.dispose()


@pytest.fixture
def db(database, settings):
    session = database.SessionLocal()
    ensure_default_user(session, settings)
    yield session
    session.close()


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_bill_payload():
    def _make(**overrides):
        payload = {
            "client_name": "Himalayan Traders",
            "client_address": "New Road, Kathmandu",
            "client_phone": "9841000000",
            "pan_number": "601234567",
            "bill_date": "2025-01-15",
            "due_date": "2025-02-14",
            "items": [
                {"description": "Web design", "quantity": 2, "unit": "pcs", "rate": 500},
                {"description": "Hosting", "quantity": 1, "unit": "yr", "rate": 250},
            ],
            "discount_type": "percentage",
            "discount_percentage": 10,
        }
        payload.update(overrides)
        return payload

    return _make
