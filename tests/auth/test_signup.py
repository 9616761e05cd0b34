"""
Tests for self-service signup and its transactional provisioning.
"""
import pytest
from sqlalchemy.exc import OperationalError

from medportal.auth import service as auth_service
from medportal.auth.models import User, UserRole
from medportal.doctors.models import Doctor, VerificationStatus
from medportal.patients.models import Patient


def signup_payload(**overrides):
    payload = {
        "fullName": "Alice Example",
        "email": "alice@example.com",
        "password": "Password1",
        "role": "PATIENT",
    }
    payload.update(overrides)
    return payload


def test_patient_signup(client, db):
    response = client.post("/api/auth/signup", json=signup_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["email"] == "alice@example.com"
    assert body["data"]["role"] == "PATIENT"
    assert isinstance(body["data"]["id"], str)

    user = db.query(User).one()
    assert user.role == UserRole.PATIENT
    assert user.is_active is True
    assert user.password_hash != "Password1"
    assert db.query(Patient).filter(Patient.user_id == user.id).count() == 1
    assert db.query(Doctor).count() == 0


def test_doctor_signup_creates_draft_profile(client, db):
    response = client.post("/api/auth/signup", json=signup_payload(role="DOCTOR", phone="+15550100"))

    assert response.status_code == 201
    user = db.query(User).one()
    assert user.phone == "+15550100"

    doctor = db.query(Doctor).one()
    assert doctor.user_id == user.id
    assert doctor.verification_status == VerificationStatus.DRAFT
    assert doctor.specialization == "General Practice"
    assert db.query(Patient).count() == 0


def test_signup_accepts_snake_case_name(client):
    payload = signup_payload()
    payload["full_name"] = payload.pop("fullName")
    assert client.post("/api/auth/signup", json=payload).status_code == 201


def test_signup_normalizes_email(client, db):
    client.post("/api/auth/signup", json=signup_payload(email="  Foo@Bar.com "))

    assert auth_service.get_user_by_email(db, "foo@bar.com") is not None
    response = client.post("/api/auth/login", json={"email": "foo@bar.com", "password": "Password1"})
    assert response.status_code == 200


def test_weak_doctor_password_lists_each_issue(client, db):
    response = client.post("/api/auth/signup", json=signup_payload(role="DOCTOR", password="weakpass"))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert len(body["errors"]) == 2
    assert all(issue["field"] == "password" for issue in body["errors"])
    assert db.query(User).count() == 0


def test_every_violation_is_reported(client):
    response = client.post(
        "/api/auth/signup",
        json={"fullName": "A", "email": "not-an-email", "password": "short", "role": "NURSE"},
    )

    assert response.status_code == 400
    fields = [issue["field"] for issue in response.json()["errors"]]
    assert fields.count("password") == 3
    assert {"fullName", "email", "role"} <= set(fields)


@pytest.mark.parametrize("payload", [signup_payload(role="ADMIN"), {"role": "ADMIN"}])
def test_admin_signup_is_forbidden(client, db, payload):
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 403
    assert response.json()["error"] == "ForbiddenRole"
    assert db.query(User).count() == 0


def test_duplicate_email_conflicts(client, db):
    assert client.post("/api/auth/signup", json=signup_payload()).status_code == 201

    response = client.post("/api/auth/signup", json=signup_payload(email="ALICE@example.com", role="DOCTOR"))

    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"
    assert db.query(User).count() == 1
    assert db.query(Doctor).count() == 0


def test_lost_race_on_unique_email_is_a_conflict(client, db, monkeypatch):
    assert client.post("/api/auth/signup", json=signup_payload()).status_code == 201

    # Second request passes the fast-path check, as if it ran concurrently
    monkeypatch.setattr(auth_service, "get_user_by_email", lambda db, email: None)
    response = client.post("/api/auth/signup", json=signup_payload())

    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"
    assert db.query(User).count() == 1
    assert db.query(Patient).count() == 1


@pytest.mark.parametrize("role", ["PATIENT", "DOCTOR"])
def test_failed_profile_insert_rolls_back_user(client, db, monkeypatch, role):
    def failing_profile(db, user):
        raise OperationalError("INSERT INTO profile", {}, Exception("disk I/O error"))

    monkeypatch.setattr(auth_service, "create_profile_for", failing_profile)
    response = client.post("/api/auth/signup", json=signup_payload(role=role))

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "InternalError"
    assert "disk" not in body["message"]
    assert db.query(User).count() == 0
    assert db.query(Patient).count() == 0
    assert db.query(Doctor).count() == 0


def test_new_doctor_cannot_log_in_until_approved(client):
    client.post("/api/auth/signup", json=signup_payload(role="DOCTOR"))
    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "Password1"})
    assert response.status_code == 403
    assert response.json()["error"] == "PendingVerification"


def test_values_longer_than_their_columns_are_rejected(client, db):
    response = client.post("/api/auth/signup", json=signup_payload(fullName="A" * 256, phone="5" * 33))

    assert response.status_code == 400
    fields = {issue["field"] for issue in response.json()["errors"]}
    assert fields == {"fullName", "phone"}
    assert db.query(User).count() == 0
