"""
Registry of every ORM model, imported so Base.metadata knows all tables.
"""
from .auth.models import User, UserRole
from .doctors.models import Doctor, VerificationStatus
from .patients.models import Patient

__all__ = ["User", "UserRole", "Doctor", "VerificationStatus", "Patient"]
