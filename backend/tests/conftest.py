"""
Shared fixtures.

Every test gets a fresh in-memory database with the superadmin seeded and a
TestClient whose requests run against it. Factory fixtures register, log in
and approve accounts through the public API.
"""

import os

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.base import Base
from app.db.init_db import seed_superadmin
from app.db.session import get_db
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    """Session on a freshly created schema; tables are dropped afterwards."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    seed_superadmin(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def bearer():
    def _bearer(token):
        return {"Authorization": f"Bearer {token}"}
    return _bearer


@pytest.fixture
def login(client):
    """Factory: log in and return the token."""
    def _login(email, password):
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]
    return _login


@pytest.fixture
def admin_headers(login, bearer):
    return bearer(login(settings.SUPERADMIN_EMAIL, settings.SUPERADMIN_PASSWORD))


@pytest.fixture
def register_employee(client):
    """Factory: register an employee and return the response body."""
    def _register(email="jane@example.com", name="Jane Doe", password="secret123", **extra):
        payload = {"email": email, "name": name, "password": password}
        payload.update(extra)
        response = client.post("/api/auth/register/employee", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def register_company(client):
    """Factory: register a company and return the response body."""
    def _register(email="hr@acme.com", company_name="Acme Ltd", password="acme12345", **extra):
        payload = {"email": email, "companyName": company_name, "password": password}
        payload.update(extra)
        response = client.post("/api/auth/register/company", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def pending_company(register_company, login, bearer):
    """A freshly registered company: id and auth headers."""
    body = register_company()
    token = login("hr@acme.com", "acme12345")
    return {"id": body["company"]["id"], "headers": bearer(token)}


@pytest.fixture
def approved_company(client, pending_company, admin_headers):
    response = client.patch(
        f"/api/admin/company/{pending_company['id']}/approve",
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    return pending_company


@pytest.fixture
def employee(client, register_employee, login, bearer):
    """An active employee looking for IT work: id and auth headers."""
    body = register_employee()
    headers = bearer(login("jane@example.com", "secret123"))
    response = client.patch(
        "/api/employee/profile",
        json={"jobPreferences": ["IT"], "skills": ["Python"]},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return {"id": body["employee"]["id"], "headers": headers}


@pytest.fixture
def create_job(client, approved_company):
    """Factory: post a job as the approved company and return it."""
    def _create_job(**kwargs):
        payload = {
            "title": "Backend Developer",
            "description": "Build and run our APIs.",
            "category": "IT",
            "employmentType": "fulltime",
        }
        payload.update(kwargs)
        response = client.post("/api/company/job", json=payload, headers=approved_company["headers"])
        assert response.status_code == 201, response.text
        return response.json()["job"]
    return _create_job
