"""Shared fixtures: isolated in-memory database, temporary PDF directory, HTTP clients."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import all models so every table is registered on Base.metadata
import telecare.models.consultation  # noqa: F401
import telecare.models.doctor  # noqa: F401
import telecare.models.patient  # noqa: F401
from telecare.core.config import settings
from telecare.main import app
from telecare.models.base import Base, get_db
from telecare.services.pdf_storage import pdf_storage


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture()
def session_factory():
    """One in-memory SQLite database per test, shared across connections."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def pdf_dir(tmp_path, monkeypatch):
    directory = tmp_path / "prescriptions"
    monkeypatch.setattr(pdf_storage, "base_dir", str(directory))
    return directory


@pytest.fixture()
def make_client(session_factory, pdf_dir):
    """Return a factory of TestClients; each one carries its own session cookie."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client):
    return make_client()
