"""
Patient Model - One-to-one extension of a PATIENT user.

Created in the same transaction as its User at signup and deleted with it.
"""
from sqlalchemy import Column, Date, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from ..database import Base, BigIntId


class Patient(Base):
    """
    Patient Model - Stores patient-specific information

    Fields:
    - id: Primary key for patient profile
    - user_id: Foreign key to User model (unique)
    - gender, date_of_birth, address, emergency_contact: optional details
    - created_at / updated_at: Timestamps
    """
    __tablename__ = "patients"

    id = Column(BigIntId, primary_key=True, index=True)
    user_id = Column(BigIntId, ForeignKey("users.id"), unique=True, nullable=False)
    gender = Column(String(32), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    address = Column(String, nullable=True)
    emergency_contact = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User")

    def __repr__(self):
        return f"<Patient(id={self.id}, user_id={self.user_id})>"
