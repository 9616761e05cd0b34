"""
Doctor Service - Business logic for doctor profile management.

This module provides the doctor self-service profile, the admin doctor
views, and the admin update/delete operations that keep the Doctor row and
its parent User row consistent inside one transaction.
"""
from typing import Any, Dict, Optional
import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..auth.exceptions import EmailAlreadyExistsException
from ..auth.models import User
from ..auth.service import apply_user_changes
from ..core.pagination import PageParams, paginate
from ..database import atomic
from ..exceptions import ConstraintError, InternalError, NotFoundError, ValidationError
from .models import PRE_APPROVAL_STATUSES, Doctor, VerificationStatus
from .schemas import (
    NON_NULLABLE_DOCTOR_FIELDS,
    USER_LEVEL_FIELDS,
    AdminDoctorUpdate,
    DoctorDetail,
    DoctorListItem,
    DoctorListResponse,
    DoctorProfileFields,
    DoctorProfileUpdate,
    DoctorStats,
    VerificationBucket,
)
from .workflow import apply_admin_status, submit_for_review

# Set up logging
logger = logging.getLogger(__name__)

PROFILE_FIELDS = tuple(DoctorProfileFields.model_fields)

BUCKET_STATUSES = {
    VerificationBucket.VERIFIED: (VerificationStatus.APPROVED,),
    VerificationBucket.PENDING: PRE_APPROVAL_STATUSES,
    VerificationBucket.SUSPENDED: (VerificationStatus.SUSPENDED,),
    VerificationBucket.REJECTED: (VerificationStatus.REJECTED,),
}


def get_doctor_profile(db: Session, doctor_id: int) -> Doctor:
    """
    Get a doctor profile by ID.

    Raises:
        NotFoundError: If doctor profile not found
    """
    doctor = (
        db.query(Doctor)
        .options(joinedload(Doctor.user))
        .filter(Doctor.id == doctor_id)
        .first()
    )
    if not doctor:
        raise NotFoundError("Doctor not found")
    return doctor


def get_doctor_profile_by_user_id(db: Session, user_id: int) -> Doctor:
    """
    Get the doctor profile owned by a user.

    Users created as DOCTOR through admin tools have no profile row until
    one is provisioned, and get a NotFoundError here.
    """
    doctor = (
        db.query(Doctor)
        .options(joinedload(Doctor.user))
        .filter(Doctor.user_id == user_id)
        .first()
    )
    if not doctor:
        raise NotFoundError("Doctor profile not found.")
    return doctor


def to_detail(doctor: Doctor) -> DoctorDetail:
    profile = {field: getattr(doctor, field) for field in PROFILE_FIELDS}
    user = doctor.user
    return DoctorDetail(
        **profile,
        doctor_id=doctor.id,
        user_id=doctor.user_id,
        full_name=user.full_name,
        email=user.email,
        phone=user.phone,
        is_active=user.is_active,
        verification_status=doctor.verification_status,
        created_at=doctor.created_at,
        updated_at=doctor.updated_at,
        last_login_at=user.last_login_at,
    )


def _split_changes(changes: Dict[str, Any]):
    """Split a partial update into User-level and Doctor-level changes."""
    user_changes = {k: v for k, v in changes.items() if k in USER_LEVEL_FIELDS}
    doctor_changes = {k: v for k, v in changes.items() if k not in USER_LEVEL_FIELDS}

    null_fields = [k for k in NON_NULLABLE_DOCTOR_FIELDS if k in doctor_changes and doctor_changes[k] is None]
    if null_fields:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": field, "message": f"{field} cannot be null"} for field in null_fields],
        )
    return user_changes, doctor_changes


def _commit_doctor_changes(db: Session, doctor: Doctor, user_changes: Dict[str, Any],
                           doctor_changes: Dict[str, Any], operation: str) -> None:
    """Write both rows in one transaction and translate database failures."""
    try:
        with atomic(db):
            if user_changes:
                apply_user_changes(doctor.user, user_changes)
            for field, value in doctor_changes.items():
                setattr(doctor, field, value)
            db.flush()
    except IntegrityError:
        logger.warning(f"{operation} for doctor {doctor.id} hit a unique constraint")
        raise EmailAlreadyExistsException("Email already in use")
    except SQLAlchemyError:
        logger.exception(f"{operation} failed for doctor {doctor.id}")
        raise InternalError("Failed to update doctor")


def update_own_profile(db: Session, user_id: int, profile_data: DoctorProfileUpdate) -> Doctor:
    """
    Doctor self-service update of the profile and the basic user fields.

    Raises:
        NotFoundError: If the doctor has no profile row
        ValidationError: If a required field is nulled
        ConflictError: If submitting from a state that does not allow it
    """
    doctor = get_doctor_profile_by_user_id(db, user_id)

    changes = profile_data.model_dump(exclude_unset=True)
    submit = changes.pop("action", None) == "SUBMIT_FOR_REVIEW"
    user_changes, doctor_changes = _split_changes(changes)

    if submit:
        previous = doctor.verification_status
        submit_for_review(doctor)
        logger.info(f"Doctor {doctor.id} submitted for review (was {previous.value})")

    _commit_doctor_changes(db, doctor, user_changes, doctor_changes, "Profile update")
    logger.info(f"Doctor profile {doctor.id} updated by its owner")
    return get_doctor_profile(db, doctor.id)


def admin_update_doctor(db: Session, doctor_id: int, update: AdminDoctorUpdate) -> Doctor:
    """
    Admin partial update of a doctor across the User and Doctor rows.

    Raises:
        NotFoundError: If the doctor does not exist (before any write)
        ValidationError: On invalid values or a status admins may not set
        ConflictError: On an email already in use or an invalid transition
    """
    doctor = get_doctor_profile(db, doctor_id)

    changes = update.model_dump(exclude_unset=True)
    user_changes, doctor_changes = _split_changes(changes)

    target_status = doctor_changes.pop("verification_status", None)
    if target_status is not None:
        previous = doctor.verification_status
        apply_admin_status(doctor, target_status)
        logger.info(f"Doctor {doctor.id} verification {previous.value} -> {doctor.verification_status.value}")

    _commit_doctor_changes(db, doctor, user_changes, doctor_changes, "Admin doctor update")
    logger.info(f"Doctor {doctor.id} updated by admin")
    return get_doctor_profile(db, doctor.id)


def admin_delete_doctor(db: Session, doctor_id: int) -> None:
    """
    Hard delete a doctor: the Doctor row first, then its User, in one transaction.

    Raises:
        NotFoundError: If the doctor does not exist
        ConstraintError: If dependent records block the delete
    """
    doctor = get_doctor_profile(db, doctor_id)
    user = doctor.user
    user_id = user.id

    try:
        with atomic(db):
            db.delete(doctor)
            db.flush()
            db.delete(user)
            db.flush()
    except IntegrityError:
        logger.warning(f"Delete of doctor {doctor_id} blocked by related records")
        raise ConstraintError("Failed to delete doctor due to relational constraints.")
    except SQLAlchemyError:
        logger.exception(f"Delete of doctor {doctor_id} failed")
        raise InternalError("Failed to delete doctor")

    logger.info(f"Doctor {doctor_id} and user {user_id} deleted")


def list_doctors(
    db: Session,
    page_params: PageParams,
    search: Optional[str] = None,
    bucket: VerificationBucket = VerificationBucket.ALL,
) -> DoctorListResponse:
    """
    Get a paginated list of doctors, newest first.

    Args:
        db: Database session
        page_params: Pagination parameters
        search: Substring matched against the doctor's name or email
        bucket: Verification bucket filter

    Returns:
        DoctorListResponse
    """
    query = db.query(Doctor).join(User, Doctor.user_id == User.id).options(joinedload(Doctor.user))

    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))

    if bucket in BUCKET_STATUSES:
        query = query.filter(Doctor.verification_status.in_(BUCKET_STATUSES[bucket]))

    query = query.order_by(Doctor.created_at.desc(), Doctor.id.desc())
    doctors, total, pages = paginate(query, page_params)

    return DoctorListResponse(
        doctors=[
            DoctorListItem(
                doctor_id=doctor.id,
                user_id=doctor.user_id,
                full_name=doctor.user.full_name,
                email=doctor.user.email,
                phone=doctor.user.phone,
                specialization=doctor.specialization,
                license_no=doctor.license_no,
                hospital_name=doctor.hospital_name,
                verification_status=doctor.verification_status,
                is_active=doctor.user.is_active,
                created_at=doctor.created_at,
            )
            for doctor in doctors
        ],
        total=total,
        page=page_params.page,
        totalPages=pages,
    )


def doctor_stats(db: Session) -> DoctorStats:
    """Counts for the admin doctor dashboard."""
    total = db.query(func.count(Doctor.id)).scalar()
    verified = (
        db.query(func.count(Doctor.id))
        .filter(Doctor.verification_status == VerificationStatus.APPROVED)
        .scalar()
    )
    pending = (
        db.query(func.count(Doctor.id))
        .filter(Doctor.verification_status.in_(PRE_APPROVAL_STATUSES))
        .scalar()
    )
    inactive = (
        db.query(func.count(Doctor.id))
        .join(User, Doctor.user_id == User.id)
        .filter(User.is_active.is_(False))
        .scalar()
    )
    return DoctorStats(
        totalDoctors=total,
        verifiedDoctors=verified,
        pendingDoctors=pending,
        inactiveAccounts=inactive,
    )
