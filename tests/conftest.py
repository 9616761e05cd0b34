"""
Test configuration for the healthcare portal backend.
"""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "10"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from medportal.auth.models import User, UserRole
from medportal.core.security import hash_password
from medportal.database import Database, get_db
from medportal.doctors.models import Doctor, VerificationStatus
from medportal.main import create_app
from medportal.patients.models import Patient

from .helpers import DEFAULT_PASSWORD, login


@pytest.fixture(scope="function")
def database():
    """
    Fresh in-memory database for each test.
    """
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture(scope="function")
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def app(database, db):
    app = create_app(database=database)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    # Override the get_db dependency
    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
def client(app, db):
    """
    Create a test client with a test database session.
    """
    with TestClient(app) as client:
        yield client
        db.close()


@pytest.fixture
def create_user(db):
    """
    Factory inserting a user directly, with its profile row.

    ``doctor_status`` controls the Doctor row of a DOCTOR user; pass
    ``with_profile=False`` to leave the profile out.
    """
    def _create_user(
        email="user@example.com",
        password=DEFAULT_PASSWORD,
        role=UserRole.PATIENT,
        full_name="Test User",
        is_active=True,
        doctor_status=VerificationStatus.APPROVED,
        with_profile=True,
    ):
        user = User(
            email=email,
            full_name=full_name,
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.flush()
        if with_profile and role == UserRole.PATIENT:
            db.add(Patient(user_id=user.id))
        elif with_profile and role == UserRole.DOCTOR:
            db.add(Doctor(user_id=user.id, specialization="Cardiology", verification_status=doctor_status))
        db.commit()
        db.refresh(user)
        return user

    return _create_user


@pytest.fixture
def admin_client(client, create_user):
    """Client holding a session cookie for a freshly created admin."""
    create_user(email="admin@example.com", role=UserRole.ADMIN, full_name="Admin User")
    response = login(client, "admin@example.com")
    assert response.status_code == 200
    return client


@pytest.fixture
def doctor_user(create_user):
    return create_user(email="doctor@example.com", role=UserRole.DOCTOR, full_name="Dr. Jane Smith")
