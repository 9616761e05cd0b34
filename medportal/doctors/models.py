"""
Doctor Model - Stores the professional profile and verification state of a doctor.

This model extends the base User model with doctor-specific fields.
"""
import enum

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from ..database import Base, BigIntId

DEFAULT_SPECIALIZATION = "General Practice"


class VerificationStatus(str, enum.Enum):
    """
    Admissions workflow for doctor accounts.

    DRAFT -> SUBMITTED -> UNDER_REVIEW -> APPROVED, with REJECTED as a side
    terminal state and SUSPENDED reachable from APPROVED.
    """
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


# States a doctor may still submit from
PRE_APPROVAL_STATUSES = (
    VerificationStatus.DRAFT,
    VerificationStatus.SUBMITTED,
    VerificationStatus.UNDER_REVIEW,
)

# Targets an admin may set directly
ADMIN_SETTABLE_STATUSES = (
    VerificationStatus.UNDER_REVIEW,
    VerificationStatus.APPROVED,
    VerificationStatus.REJECTED,
    VerificationStatus.SUSPENDED,
)


class Doctor(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key for doctor profile
    - user_id: Foreign key to User model (unique)
    - verification_status: Gate for authentication; only APPROVED may log in
    - specialization .. govt_id_url: extended professional profile
    - created_at / updated_at: Timestamps
    """
    __tablename__ = "doctors"

    id = Column(BigIntId, primary_key=True, index=True)
    user_id = Column(BigIntId, ForeignKey("users.id"), unique=True, nullable=False)
    verification_status = Column(
        Enum(VerificationStatus, name="verification_status"),
        nullable=False,
        default=VerificationStatus.DRAFT,
        index=True,
    )

    # Personal
    gender = Column(String(32), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    nationality = Column(String(100), nullable=True)
    profile_photo_url = Column(String, nullable=True)

    # Practice
    specialization = Column(String(255), nullable=False, default=DEFAULT_SPECIALIZATION)
    sub_specialty = Column(String(255), nullable=True)
    hospital_name = Column(String(255), nullable=True)
    clinic_address = Column(String, nullable=True)
    consultation_hours = Column(String, nullable=True)
    fee = Column(Numeric(10, 2), nullable=False, default=0)  # 10 digits total, 2 decimal places
    bio = Column(String, nullable=True)
    experience_years = Column(Integer, nullable=True)
    professional_memberships = Column(String, nullable=True)

    # Credentials
    license_no = Column(String(100), nullable=True)
    license_expiry_date = Column(Date, nullable=True)
    license_cert_url = Column(String, nullable=True)
    degree = Column(String(255), nullable=True)
    university_name = Column(String(255), nullable=True)
    graduation_year = Column(Integer, nullable=True)
    degree_cert_url = Column(String, nullable=True)
    govt_id_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User")

    def __repr__(self):
        """String representation of the Doctor model"""
        return f"<Doctor(id={self.id}, user_id={self.user_id}, status={self.verification_status})>"

    @property
    def is_approved(self) -> bool:
        return self.verification_status == VerificationStatus.APPROVED

    @property
    def full_name(self) -> str:
        """Get doctor's full name from associated user"""
        return self.user.full_name if self.user else None

    @property
    def email(self) -> str:
        """Get doctor's email from associated user"""
        return self.user.email if self.user else None
