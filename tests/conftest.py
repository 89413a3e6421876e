"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seed companies, jobs and users
- Auth headers for an admin and a regular user
"""

import os

# Cheapest bcrypt cost so seeding users stays fast; must be set before jobly is imported
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db
from jobly.core.security import create_access_token, get_password_hash
from jobly.models import Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed(db_session):
    """
    Three companies, three jobs and two users (u1 regular, admin).

    Returns the expected API-shaped records:
    {"companies": [...], "jobs": [...], "users": [...]}
    """
    db_session.add_all([
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
        Company(handle="c3", name="C3", description="Desc3", num_employees=3, logo_url="http://c3.img"),
    ])
    db_session.commit()

    jobs = [
        Job(title="Job1", salary=100, equity=Decimal("0.1"), company_handle="c1"),
        Job(title="Job2", salary=200, equity=Decimal("0"), company_handle="c2"),
        Job(title="Job3", salary=300, equity=Decimal("0.3"), company_handle="c1"),
    ]
    db_session.add_all(jobs)

    db_session.add_all([
        User(username="u1", password=get_password_hash("password1"), first_name="U1F",
             last_name="U1L", email="u1@email.com", is_admin=False),
        User(username="admin", password=get_password_hash("password2"), first_name="AdF",
             last_name="AdL", email="admin@email.com", is_admin=True),
    ])
    db_session.commit()

    return {
        "companies": [
            {"handle": "c1", "name": "C1", "description": "Desc1", "numEmployees": 1, "logoUrl": "http://c1.img"},
            {"handle": "c2", "name": "C2", "description": "Desc2", "numEmployees": 2, "logoUrl": "http://c2.img"},
            {"handle": "c3", "name": "C3", "description": "Desc3", "numEmployees": 3, "logoUrl": "http://c3.img"},
        ],
        "jobs": [
            {"id": job.id, "title": job.title, "salary": job.salary,
             "equity": job.equity, "companyHandle": job.company_handle}
            for job in jobs
        ],
        "users": [
            {"username": "admin", "firstName": "AdF", "lastName": "AdL", "email": "admin@email.com", "isAdmin": True},
            {"username": "u1", "firstName": "U1F", "lastName": "U1L", "email": "u1@email.com", "isAdmin": False},
        ],
    }


@pytest.fixture
def user_headers():
    """Authorization header for the regular user u1"""
    return {"Authorization": f"Bearer {create_access_token('u1', is_admin=False)}"}


@pytest.fixture
def admin_headers():
    """Authorization header for the admin user"""
    return {"Authorization": f"Bearer {create_access_token('admin', is_admin=True)}"}
