"""
Profile linkage helpers.

Every PATIENT or DOCTOR user owns exactly one profile row keyed by user id.
These helpers create, find, and remove that row inside the caller's
transaction; none of them commit.
"""
from typing import Optional, Union
import logging

from sqlalchemy.orm import Session

from .auth.models import User, UserRole
from .doctors.models import DEFAULT_SPECIALIZATION, Doctor, VerificationStatus
from .patients.models import Patient

logger = logging.getLogger(__name__)

Profile = Union[Patient, Doctor]


def get_doctor_by_user_id(db: Session, user_id: int) -> Optional[Doctor]:
    return db.query(Doctor).filter(Doctor.user_id == user_id).first()


def create_profile_for(db: Session, user: User) -> Optional[Profile]:
    """
    Add the role-specific profile row for a freshly flushed user.

    Args:
        db: Database session (transaction owned by the caller)
        user: User with an assigned id

    Returns:
        The new Patient or Doctor, or None for roles without a profile
    """
    if user.role == UserRole.PATIENT:
        profile = Patient(user_id=user.id)
    elif user.role == UserRole.DOCTOR:
        profile = Doctor(
            user_id=user.id,
            specialization=DEFAULT_SPECIALIZATION,
            verification_status=VerificationStatus.DRAFT,
        )
    else:
        return None

    db.add(profile)
    db.flush()
    logger.info(f"Created {user.role.value.lower()} profile for user {user.id}")
    return profile


def delete_profile_for(db: Session, user: User) -> None:
    """Delete whichever profile rows reference the user, flushing before the parent goes."""
    for model in (Doctor, Patient):
        profile = db.query(model).filter(model.user_id == user.id).first()
        if profile is not None:
            db.delete(profile)
    db.flush()
