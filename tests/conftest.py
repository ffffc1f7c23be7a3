import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before the app (and its settings) are imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "0"

from app.main import app
from app.core.database import get_db, Base

from .helpers import register, book

# In-memory database shared by every connection of the test session
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def doctor(client):
    return register(client, "Doctor User", "doctor@example.com", "doctor")


@pytest.fixture
def other_doctor(client):
    return register(client, "Other Doctor", "doctor2@example.com", "doctor")


@pytest.fixture
def patient(client):
    return register(client, "Patient User", "patient@example.com", "patient")


@pytest.fixture
def other_patient(client):
    return register(client, "Other Patient", "patient2@example.com", "patient")


@pytest.fixture
def admin(client):
    return register(client, "Admin User", "admin@example.com", "admin")


@pytest.fixture
def appointment(client, patient, doctor):
    return book(client, patient, doctor)
