import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from eventos_clima.main import create_app
from eventos_clima.shared.database import Database
from eventos_clima.shared.provisioning import provision_database


@pytest.fixture(scope="function")
def test_database():
    """In-memory SQLite database shared by every session of one test."""
    database = Database(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield database
    database.close()


@pytest.fixture(scope="function")
def provisioned_database(test_database):
    """Database with tables created and the event types seeded."""
    provision_database(test_database)
    return test_database


@pytest.fixture(scope="function")
def db(provisioned_database):
    with provisioned_database.session() as session:
        yield session


@pytest.fixture(scope="function")
def client(test_database):
    """Test client; the lifespan provisions the database on startup."""
    app = create_app(test_database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def evento_payload():
    return {
        "nome": "Teste",
        "data": "2025-11-13T10:00:00Z",
        "coordenadas": {"latitude": -23.5505, "longitude": -46.6333},
        "eventos": ["Chuva Forte", "Raios"],
    }
