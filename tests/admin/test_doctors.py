"""
Tests for admin doctor management and the verification workflow.
"""
import pytest
from sqlalchemy import text

from medportal.auth.models import User, UserRole
from medportal.doctors.models import Doctor, VerificationStatus

from ..helpers import DEFAULT_PASSWORD, doctor_of, login


@pytest.fixture
def make_doctor(create_user, db):
    def _make_doctor(email, status=VerificationStatus.DRAFT, **kwargs):
        user = create_user(email=email, role=UserRole.DOCTOR, doctor_status=status, **kwargs)
        return doctor_of(db, user)
    return _make_doctor


class TestList:
    @pytest.fixture
    def roster(self, make_doctor):
        make_doctor("draft@example.com", VerificationStatus.DRAFT, full_name="Dr. Draft")
        make_doctor("submitted@example.com", VerificationStatus.SUBMITTED)
        make_doctor("review@example.com", VerificationStatus.UNDER_REVIEW)
        make_doctor("approved@example.com", VerificationStatus.APPROVED)
        make_doctor("inactive@example.com", VerificationStatus.APPROVED, is_active=False)
        make_doctor("rejected@example.com", VerificationStatus.REJECTED)
        make_doctor("suspended@example.com", VerificationStatus.SUSPENDED)

    @pytest.mark.parametrize(
        "bucket,expected",
        [
            ("ALL", 7),
            ("VERIFIED", 2),
            ("PENDING", 3),
            ("SUSPENDED", 1),
            ("REJECTED", 1),
        ],
    )
    def test_buckets(self, admin_client, roster, bucket, expected):
        data = admin_client.get("/api/admin/doctors", params={"verifyStatus": bucket}).json()["data"]
        assert data["total"] == expected
        assert len(data["doctors"]) == expected

    def test_search_and_shape(self, admin_client, roster):
        data = admin_client.get("/api/admin/doctors", params={"search": "draft"}).json()["data"]
        assert data["total"] == 1
        doctor = data["doctors"][0]
        assert doctor["full_name"] == "Dr. Draft"
        assert doctor["verification_status"] == "DRAFT"
        assert isinstance(doctor["doctor_id"], str)
        assert isinstance(doctor["user_id"], str)

    def test_pagination(self, admin_client, roster):
        data = admin_client.get("/api/admin/doctors", params={"page": 3, "limit": 3}).json()["data"]
        assert data["page"] == 3
        assert data["totalPages"] == 3
        assert len(data["doctors"]) == 1

    def test_unknown_bucket(self, admin_client):
        assert admin_client.get("/api/admin/doctors", params={"verifyStatus": "LOST"}).status_code == 400

    def test_stats(self, admin_client, roster):
        response = admin_client.get("/api/admin/doctors/stats")
        assert response.json()["data"] == {
            "totalDoctors": 7,
            "verifiedDoctors": 2,
            "pendingDoctors": 3,
            "inactiveAccounts": 1,
        }


class TestGet:
    def test_detail_merges_user_fields(self, admin_client, make_doctor):
        doctor = make_doctor("doc@example.com", full_name="Dr. Who")
        response = admin_client.get(f"/api/admin/doctors/{doctor.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["doctor_id"] == str(doctor.id)
        assert data["full_name"] == "Dr. Who"
        assert data["email"] == "doc@example.com"
        assert data["specialization"] == "Cardiology"
        assert data["verification_status"] == "DRAFT"
        assert "password_hash" not in data

    def test_missing(self, admin_client):
        response = admin_client.get("/api/admin/doctors/12345")
        assert response.status_code == 404
        assert response.json()["message"] == "Doctor not found"


class TestUpdate:
    def test_approving_submitted_doctor_unlocks_login(self, admin_client, make_doctor):
        doctor = make_doctor("doc@example.com", VerificationStatus.SUBMITTED)
        assert login(admin_client, "doc@example.com").json()["error"] == "PendingVerification"

        login(admin_client, "admin@example.com")
        response = admin_client.put(f"/api/admin/doctors/{doctor.id}", json={"verification_status": "APPROVED"})
        assert response.status_code == 200
        assert response.json()["data"]["verification_status"] == "APPROVED"

        response = login(admin_client, "doc@example.com", password=DEFAULT_PASSWORD, role="DOCTOR")
        assert response.status_code == 200

    def test_partial_update_touches_only_sent_fields(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com", full_name="Dr. Before")
        doctor.bio = "Original bio"
        db.commit()

        response = admin_client.put(
            f"/api/admin/doctors/{doctor.id}",
            json={"hospital_name": "St. Mary", "phone": "+15550199", "fee": "150.50"},
        )

        assert response.status_code == 200
        db.refresh(doctor)
        db.refresh(doctor.user)
        assert doctor.hospital_name == "St. Mary"
        assert str(doctor.fee) == "150.50"
        assert doctor.bio == "Original bio"
        assert doctor.specialization == "Cardiology"
        assert doctor.user.phone == "+15550199"
        assert doctor.user.full_name == "Dr. Before"
        assert doctor.verification_status == VerificationStatus.DRAFT

    def test_deactivate_through_doctor_update(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com", VerificationStatus.APPROVED)
        admin_client.put(f"/api/admin/doctors/{doctor.id}", json={"is_active": False})
        db.refresh(doctor.user)
        assert doctor.user.is_active is False

    @pytest.mark.parametrize("target", ["DRAFT", "SUBMITTED"])
    def test_admin_cannot_set_pre_review_states(self, admin_client, make_doctor, db, target):
        doctor = make_doctor("doc@example.com", VerificationStatus.UNDER_REVIEW)

        response = admin_client.put(f"/api/admin/doctors/{doctor.id}", json={"verification_status": target})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "verification_status"
        db.refresh(doctor)
        assert doctor.verification_status == VerificationStatus.UNDER_REVIEW

    def test_only_approved_doctors_can_be_suspended(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com", VerificationStatus.SUBMITTED)

        response = admin_client.put(f"/api/admin/doctors/{doctor.id}", json={"verification_status": "SUSPENDED"})

        assert response.status_code == 409
        db.refresh(doctor)
        assert doctor.verification_status == VerificationStatus.SUBMITTED

    def test_suspend_approved_doctor_blocks_login(self, admin_client, make_doctor):
        doctor = make_doctor("doc@example.com", VerificationStatus.APPROVED)

        response = admin_client.put(f"/api/admin/doctors/{doctor.id}", json={"verification_status": "SUSPENDED"})

        assert response.status_code == 200
        assert login(admin_client, "doc@example.com").json()["error"] == "PendingVerification"

    def test_null_required_field(self, admin_client, make_doctor):
        doctor = make_doctor("doc@example.com")
        response = admin_client.put(f"/api/admin/doctors/{doctor.id}", json={"specialization": None})
        assert response.status_code == 400

    def test_email_conflict_rolls_back_whole_update(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com")

        response = admin_client.put(
            f"/api/admin/doctors/{doctor.id}",
            json={"email": "admin@example.com", "hospital_name": "Nowhere"},
        )

        assert response.status_code == 409
        db.refresh(doctor)
        assert doctor.hospital_name is None
        assert doctor.user.email == "doc@example.com"

    def test_update_missing_doctor(self, admin_client):
        response = admin_client.put("/api/admin/doctors/999", json={"verification_status": "APPROVED"})
        assert response.status_code == 404


class TestDelete:
    def test_delete_removes_doctor_and_user(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com")
        doctor_id, user_id = doctor.id, doctor.user_id

        response = admin_client.delete(f"/api/admin/doctors/{doctor_id}")

        assert response.status_code == 200
        assert db.query(Doctor).filter(Doctor.id == doctor_id).count() == 0
        assert db.query(User).filter(User.id == user_id).count() == 0

        repeat = admin_client.delete(f"/api/admin/doctors/{doctor_id}")
        assert repeat.status_code == 404
        assert repeat.json()["error"] == "NotFound"

    def test_dependent_rows_block_delete(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com", VerificationStatus.APPROVED)
        doctor_id, user_id = doctor.id, doctor.user_id
        db.execute(text(
            "CREATE TABLE appointments ("
            "id INTEGER PRIMARY KEY, doctor_id INTEGER NOT NULL REFERENCES doctors(id))"
        ))
        db.execute(text("INSERT INTO appointments (doctor_id) VALUES (:doctor_id)"), {"doctor_id": doctor_id})
        db.commit()

        response = admin_client.delete(f"/api/admin/doctors/{doctor_id}")

        assert response.status_code == 409
        assert response.json()["error"] == "ConstraintError"
        assert db.query(Doctor).filter(Doctor.id == doctor_id).count() == 1
        assert db.query(User).filter(User.id == user_id).count() == 1

    def test_delete_missing_doctor(self, admin_client):
        assert admin_client.delete("/api/admin/doctors/999").status_code == 404


class TestFieldLimits:
    def test_overlong_profile_fields(self, admin_client, make_doctor):
        doctor = make_doctor("doc@example.com")

        response = admin_client.put(
            f"/api/admin/doctors/{doctor.id}",
            json={"hospital_name": "H" * 256, "license_no": "L" * 101},
        )

        assert response.status_code == 400
        assert {issue["field"] for issue in response.json()["errors"]} == {"hospital_name", "license_no"}

    def test_overlong_user_fields_on_doctor(self, admin_client, make_doctor, db):
        doctor = make_doctor("doc@example.com", full_name="Dr. Kept")

        response = admin_client.put(
            f"/api/admin/doctors/{doctor.id}",
            json={"full_name": "N" * 256, "phone": "1" * 33},
        )

        assert response.status_code == 400
        assert {issue["field"] for issue in response.json()["errors"]} == {"full_name", "phone"}
        db.refresh(doctor.user)
        assert doctor.user.full_name == "Dr. Kept"
