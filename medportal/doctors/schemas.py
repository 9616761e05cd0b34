"""
Doctor Schemas - Pydantic models for doctor profile data validation and serialization.

Doctor registration happens through the auth signup; these schemas cover the
profile itself, the admin views and the verification workflow.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..core.types import WireId
from .models import VerificationStatus

# Doctor fields that a partial update must never set to null
NON_NULLABLE_DOCTOR_FIELDS = ("specialization", "fee", "verification_status")

# Update keys stored on the parent User row
USER_LEVEL_FIELDS = ("is_active", "full_name", "email", "phone")


class VerificationBucket(str, Enum):
    """Coarse verification filter used by the admin doctor list."""
    ALL = "ALL"
    VERIFIED = "VERIFIED"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"
    REJECTED = "REJECTED"


class DoctorProfileFields(BaseModel):
    """
    Extended professional profile, every field optional for partial updates.
    """
    # Personal
    gender: Optional[str] = Field(None, max_length=32)
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = Field(None, max_length=100)
    profile_photo_url: Optional[str] = None

    # Practice
    specialization: Optional[str] = Field(None, min_length=1, max_length=255, description="Doctor's medical specialization")
    sub_specialty: Optional[str] = Field(None, max_length=255)
    hospital_name: Optional[str] = Field(None, max_length=255)
    clinic_address: Optional[str] = Field(None, description="Physical address of the doctor's clinic")
    consultation_hours: Optional[str] = None
    fee: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2, description="Consultation fee")
    bio: Optional[str] = Field(None, description="Professional biography")
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    professional_memberships: Optional[str] = None

    # Credentials
    license_no: Optional[str] = Field(None, max_length=100)
    license_expiry_date: Optional[date] = None
    license_cert_url: Optional[str] = None
    degree: Optional[str] = Field(None, max_length=255)
    university_name: Optional[str] = Field(None, max_length=255)
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    degree_cert_url: Optional[str] = None
    govt_id_url: Optional[str] = None


class DoctorProfileUpdate(DoctorProfileFields):
    """
    Doctor self-service update.

    Fields:
    - full_name, phone: stored on the User row
    - action: "SUBMIT_FOR_REVIEW" moves a pre-approval profile to SUBMITTED
    """
    full_name: Optional[str] = None
    phone: Optional[str] = None
    action: Optional[Literal["SUBMIT_FOR_REVIEW"]] = None


class AdminDoctorUpdate(DoctorProfileFields):
    """
    Admin update of a doctor, split between the User and Doctor rows.

    Only fields present in the request are written.
    """
    is_active: Optional[bool] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    verification_status: Optional[VerificationStatus] = None


class DoctorListItem(BaseModel):
    doctor_id: WireId
    user_id: WireId
    full_name: str
    email: str
    phone: Optional[str] = None
    specialization: str
    license_no: Optional[str] = None
    hospital_name: Optional[str] = None
    verification_status: VerificationStatus
    is_active: bool
    created_at: Optional[datetime] = None


class DoctorDetail(DoctorProfileFields):
    """
    Doctor Response Schema - profile merged with the owning user's fields
    """
    doctor_id: WireId
    user_id: WireId
    full_name: str
    email: str
    phone: Optional[str] = None
    is_active: bool
    verification_status: VerificationStatus
    specialization: str
    fee: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


class DoctorListResponse(BaseModel):
    """
    Doctor List Response Schema - Used when returning a page of doctors
    """
    doctors: List[DoctorListItem]
    total: int
    page: int
    totalPages: int


class DoctorStats(BaseModel):
    totalDoctors: int
    verifiedDoctors: int
    pendingDoctors: int
    inactiveAccounts: int
