"""
Shared helpers for the API tests.
"""
from medportal.doctors.models import Doctor

DEFAULT_PASSWORD = "Secret123"


def login(client, email, password=DEFAULT_PASSWORD, role=None):
    payload = {"email": email, "password": password}
    if role is not None:
        payload["role"] = role
    return client.post("/api/auth/login", json=payload)


def doctor_of(db, user):
    return db.query(Doctor).filter(Doctor.user_id == user.id).first()
