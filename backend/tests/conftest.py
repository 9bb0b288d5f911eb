# backend/tests/conftest.py
"""
Shared fixtures.

Each test gets a fresh in-memory SQLite database (StaticPool keeps the single
connection alive across sessions) with the schema created from metadata.
Business timezone is UTC unless a test overrides it.
"""

from types import SimpleNamespace
from typing import Generator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from salonbook.api.dependencies.database import get_db
from salonbook.core.config import settings
from salonbook.database import Base, configure_sqlite_engine
from salonbook.main import app
from tests.factories.salon_builders import TENANT, make_service, make_staff


@pytest.fixture(autouse=True)
def _settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "business_timezone", "UTC")
    monkeypatch.setattr(settings, "cancellation_cutoff_hours", 24)
    monkeypatch.setattr(settings, "slot_interval_minutes", 15)
    monkeypatch.setattr(settings, "default_page_size", 20)
    monkeypatch.setattr(settings, "max_page_size", 100)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(test_engine)

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    """
    Create a new database session for each test.
    """
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with the test database."""

    def override_get_db():  # type: ignore[no-untyped-def]
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    # Don't use context manager - the lifespan would touch the default database
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def salon(db: Session) -> SimpleNamespace:
    """Haircut (45min) and Maria, who works Mondays 09:00-17:00."""
    haircut = make_service(db)
    maria = make_staff(db)
    return SimpleNamespace(tenant_id=TENANT, haircut=haircut, maria=maria)
