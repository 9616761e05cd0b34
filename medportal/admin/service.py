"""
Admin Service - User management operations available to administrators.
"""
from typing import Any, Optional
import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth.exceptions import EmailAlreadyExistsException
from ..auth.models import User, UserRole
from ..auth.schemas import UserResponse
from ..auth.service import apply_user_changes, create_account, get_user_by_id, validate_new_account
from ..core.pagination import PageParams, paginate
from ..database import atomic
from ..exceptions import ConstraintError, InternalError, NotFoundError, ValidationError
from ..profiles import delete_profile_for
from .schemas import AdminUserUpdate, UserListResponse, UserStats, UserStatusFilter

# Set up logging
logger = logging.getLogger(__name__)

ALL_ROLES = tuple(UserRole)


def admin_create_user(
    db: Session,
    full_name: Any,
    email: Any,
    password: Any,
    role: Any,
    phone: Optional[str] = None,
    created_by: Optional[int] = None,
) -> User:
    """
    Create a user of any role without a Patient/Doctor profile row.

    A DOCTOR created here cannot log in until a Doctor profile exists and is
    approved.

    Raises:
        ValidationError: Listing every invalid field
        EmailAlreadyExistsException: If email already exists
    """
    data = validate_new_account(full_name, email, password, role, ALL_ROLES, phone=phone)
    user = create_account(db, with_profile=False, **data)
    logger.info(f"Admin {created_by} created {user.role.value} user {user.id}")
    return user


def admin_create_admin(db: Session, full_name: Any, email: Any, password: Any,
                       phone: Optional[str] = None, created_by: Optional[int] = None) -> User:
    return admin_create_user(db, full_name, email, password, UserRole.ADMIN, phone=phone, created_by=created_by)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(
    db: Session,
    page_params: PageParams,
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    status_filter: UserStatusFilter = UserStatusFilter.ALL,
) -> UserListResponse:
    """
    Get a paginated list of users, newest first.

    Args:
        db: Database session
        page_params: Pagination parameters
        search: Substring matched against name or email
        role: Restrict to one role (None for all)
        status_filter: ALL, active or inactive
    """
    query = db.query(User)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))

    if role is not None:
        query = query.filter(User.role == role)

    if status_filter != UserStatusFilter.ALL:
        query = query.filter(User.is_active.is_(status_filter == UserStatusFilter.ACTIVE))

    query = query.order_by(User.created_at.desc(), User.id.desc())
    users, total, pages = paginate(query, page_params)

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        totalCount=total,
        page=page_params.page,
        totalPages=pages,
    )


def user_stats(db: Session) -> UserStats:
    """Counts for the admin user dashboard."""
    total_users = db.query(func.count(User.id)).scalar()
    active_doctors = (
        db.query(func.count(User.id))
        .filter(User.role == UserRole.DOCTOR, User.is_active.is_(True))
        .scalar()
    )
    total_patients = db.query(func.count(User.id)).filter(User.role == UserRole.PATIENT).scalar()
    inactive = db.query(func.count(User.id)).filter(User.is_active.is_(False)).scalar()
    return UserStats(
        totalUsers=total_users,
        activeDoctors=active_doctors,
        totalPatients=total_patients,
        inactiveAccounts=inactive,
    )


def admin_update_user(db: Session, user_id: int, update: AdminUserUpdate) -> User:
    """
    Partial update of user-level fields.

    Raises:
        NotFoundError: If the user does not exist
        ValidationError: On invalid or nulled required fields
        EmailAlreadyExistsException: If the new email is taken
    """
    user = get_user_or_404(db, user_id)
    changes = update.model_dump(exclude_unset=True)

    nulled = [field for field in ("full_name", "email", "role", "is_active") if field in changes and changes[field] is None]
    if nulled:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": field, "message": f"{field} cannot be null"} for field in nulled],
        )

    try:
        with atomic(db):
            apply_user_changes(user, changes)
            db.flush()
    except IntegrityError:
        logger.warning(f"Update of user {user_id} hit a unique constraint")
        raise EmailAlreadyExistsException("Email already in use")
    except SQLAlchemyError:
        logger.exception(f"Update of user {user_id} failed")
        raise InternalError("Failed to update user")

    logger.info(f"User {user_id} updated by admin: {sorted(changes)}")
    return user


def admin_delete_user(db: Session, user_id: int) -> None:
    """
    Hard delete a user together with its profile row, profile first.

    Raises:
        NotFoundError: If the user does not exist
        ConstraintError: If dependent records block the delete
    """
    user = get_user_or_404(db, user_id)

    try:
        with atomic(db):
            delete_profile_for(db, user)
            db.delete(user)
            db.flush()
    except IntegrityError:
        logger.warning(f"Delete of user {user_id} blocked by related records")
        raise ConstraintError("Failed to delete user due to relational constraints.")
    except SQLAlchemyError:
        logger.exception(f"Delete of user {user_id} failed")
        raise InternalError("Failed to delete user")

    logger.info(f"User {user_id} deleted")
