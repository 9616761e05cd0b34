"""
User Model - Stores the credentials and role of every account in the portal.

Role-specific data lives in the one-to-one Patient and Doctor profile tables.
"""
import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, String
from sqlalchemy.sql import func

from ..database import Base, BigIntId


class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the portal.

    Roles:
    - ADMIN: Portal administrators, never self-registered
    - DOCTOR: Medical practitioners, gated by the verification workflow
    - PATIENT: Patients who self-register
    """
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"


class User(Base):
    """
    User Model - Stores all user identities in the system

    Fields:
    - id: Primary key (64-bit)
    - email: Unique, always trimmed and lower-cased before storage
    - full_name: User's complete name
    - phone: Contact number (optional)
    - password_hash: bcrypt hash (never store raw passwords)
    - role: ADMIN, DOCTOR or PATIENT
    - is_active: Deactivated users cannot log in or resolve a session
    - created_at / updated_at: Timestamps
    - last_login_at: Stamped on every successful login
    """
    __tablename__ = "users"

    id = Column(BigIntId, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.PATIENT)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
