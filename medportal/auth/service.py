"""
Authentication service layer for business logic.

Covers login, session resolution and account provisioning (self-service
signup and the shared creation path used by admin tools).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.permissions import SELF_SERVICE_ROLES, parse_role
from ..core.security import (
    create_session_token,
    hash_password,
    normalize_email,
    pwd_context,
    validate_password_strength,
    verify_password,
    verify_session_token,
)
from ..database import atomic
from ..exceptions import InternalError, ValidationError
from ..profiles import create_profile_for, get_doctor_by_user_id
from .exceptions import (
    AccountDeactivatedException,
    EmailAlreadyExistsException,
    ForbiddenRoleException,
    InvalidCredentialsException,
    InvalidSessionException,
    MissingCredentialsException,
    PendingVerificationException,
    RoleMismatchException,
)
from .models import User, UserRole
from .schemas import ProvisionedUser, SessionClaims, SessionUser

# Set up logging
logger = logging.getLogger(__name__)

MIN_FULL_NAME_LENGTH = 2

# Column sizes on the users table
MAX_FULL_NAME_LENGTH = 255
MAX_PHONE_LENGTH = 32


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by an already-normalized email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def full_name_error(full_name: Any) -> Optional[str]:
    """Return an error message for an unusable full name, None otherwise."""
    if not isinstance(full_name, str) or len(full_name.strip()) < MIN_FULL_NAME_LENGTH:
        return "Full name must be at least 2 characters"
    if len(full_name.strip()) > MAX_FULL_NAME_LENGTH:
        return f"Full name must be at most {MAX_FULL_NAME_LENGTH} characters"
    return None


def phone_error(phone: Optional[str]) -> Optional[str]:
    if phone is not None and len(phone) > MAX_PHONE_LENGTH:
        return f"Phone must be at most {MAX_PHONE_LENGTH} characters"
    return None


def validate_email_format(email: str) -> Optional[str]:
    """Return an error message for a syntactically invalid email, None otherwise."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return "Invalid email format"
    return None


def validate_new_account(
    full_name: Any,
    email: Any,
    password: Any,
    role: Any,
    allowed_roles: Iterable[UserRole],
    phone: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Validate account creation input, collecting every violation.

    Args:
        full_name: Raw full name
        email: Raw email (normalized here)
        password: Raw password
        role: Raw role value
        allowed_roles: Roles this entry point may create
        phone: Contact number, already blank-stripped (optional)

    Returns:
        Dict with cleaned ``full_name``, ``email``, ``password``, ``role``
        and ``phone``

    Raises:
        ValidationError: Listing all violated fields
    """
    errors = []

    name_error = full_name_error(full_name)
    if name_error:
        errors.append({"field": "fullName", "message": name_error})

    normalized_email = normalize_email(email) if isinstance(email, str) else ""
    email_error = validate_email_format(normalized_email) if normalized_email else "Invalid email format"
    if email_error:
        errors.append({"field": "email", "message": email_error})

    password_errors = validate_password_strength(password if isinstance(password, str) else None)
    errors.extend({"field": "password", "message": message} for message in password_errors)

    parsed_role = parse_role(role)
    allowed_roles = tuple(allowed_roles)
    if parsed_role not in allowed_roles:
        allowed = ", ".join(r.value for r in allowed_roles)
        errors.append({"field": "role", "message": f"Role must be one of: {allowed}"})

    phone_message = phone_error(phone)
    if phone_message:
        errors.append({"field": "phone", "message": phone_message})

    if errors:
        raise ValidationError("Validation failed", errors=errors)

    return {
        "full_name": full_name.strip(),
        "email": normalized_email,
        "password": password,
        "role": parsed_role,
        "phone": phone,
    }


def create_account(
    db: Session,
    full_name: str,
    email: str,
    password: str,
    role: UserRole,
    phone: Optional[str] = None,
    with_profile: bool = True,
) -> User:
    """
    Insert a user, and optionally its profile row, in one transaction.

    The existence check is only a fast path: the unique constraint on email
    decides concurrent races, and its violation is reported as the same
    conflict.

    Raises:
        EmailAlreadyExistsException: If the email is taken
        InternalError: If the database rejects the write for another reason
    """
    if get_user_by_email(db, email):
        logger.warning(f"Provisioning refused: email {email} already registered")
        raise EmailAlreadyExistsException()

    password_hash = hash_password(password)

    try:
        with atomic(db):
            user = User(
                full_name=full_name,
                email=email,
                phone=phone,
                password_hash=password_hash,
                role=role,
                is_active=True,
            )
            db.add(user)
            try:
                db.flush()
            except IntegrityError:
                logger.warning(f"Provisioning lost a race on email {email}")
                raise EmailAlreadyExistsException()

            if with_profile:
                create_profile_for(db, user)
    except EmailAlreadyExistsException:
        raise
    except SQLAlchemyError:
        logger.exception(f"Account provisioning failed for role {role.value}")
        raise InternalError("Failed to provision account")

    db.refresh(user)
    logger.info(f"Provisioned {role.value} account {user.id}")
    return user


def signup(
    db: Session,
    full_name: Any,
    email: Any,
    password: Any,
    role: Any,
    phone: Optional[str] = None,
) -> ProvisionedUser:
    """
    Self-service registration for patients and doctors.

    Args:
        db: Database session
        full_name: User's full name
        email: User's email address
        password: User's password
        role: PATIENT or DOCTOR
        phone: Contact number (optional)

    Returns:
        ProvisionedUser with id, email and role

    Raises:
        ForbiddenRoleException: If role is ADMIN, before any validation
        ValidationError: Listing every invalid field
        EmailAlreadyExistsException: If email already exists
    """
    if parse_role(role) == UserRole.ADMIN:
        logger.warning("Rejected self-service signup for an ADMIN account")
        raise ForbiddenRoleException()

    data = validate_new_account(full_name, email, password, role, SELF_SERVICE_ROLES, phone=phone)
    logger.info(f"{data['role'].value} signup attempt for email: {data['email']}")

    user = create_account(db, with_profile=True, **data)
    return ProvisionedUser.model_validate(user)


def apply_user_changes(user: User, changes: Dict[str, Any]) -> None:
    """
    Apply a partial update to user-level fields.

    Only keys present in ``changes`` are touched. Email is normalized;
    uniqueness is enforced by the database when the caller commits.

    Raises:
        ValidationError: Listing every invalid field
    """
    errors = []

    if "full_name" in changes:
        name_error = full_name_error(changes["full_name"])
        if name_error:
            errors.append({"field": "full_name", "message": name_error})
        else:
            changes["full_name"] = changes["full_name"].strip()

    if "phone" in changes:
        phone_message = phone_error(changes["phone"])
        if phone_message:
            errors.append({"field": "phone", "message": phone_message})

    if "email" in changes:
        email = normalize_email(changes["email"]) if isinstance(changes["email"], str) else ""
        email_error = validate_email_format(email) if email else "Invalid email format"
        if email_error:
            errors.append({"field": "email", "message": email_error})
        else:
            changes["email"] = email

    if "is_active" in changes and changes["is_active"] is None:
        errors.append({"field": "is_active", "message": "is_active cannot be null"})

    if "role" in changes and parse_role(changes["role"]) is None:
        errors.append({"field": "role", "message": "Unknown role"})

    if errors:
        raise ValidationError("Validation failed", errors=errors)

    for field, value in changes.items():
        setattr(user, field, value)


def _stamp_last_login(db: Session, user: User) -> None:
    """Best effort: a failure here never blocks the login."""
    # Rollback expires the user; reading it afterwards would hit the database again
    user_id = user.id
    try:
        user.last_login_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning(f"Could not record last login for user {user_id}", exc_info=True)


def authenticate(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    requested_role: Optional[UserRole] = None,
) -> Tuple[str, SessionClaims]:
    """
    Authenticate a user and issue a session token.

    Args:
        db: Database session
        email: User's email address
        password: User's password
        requested_role: Role chosen on the login form (optional)

    Returns:
        Tuple of the signed token and the client-visible claims

    Raises:
        MissingCredentialsException: If email or password is absent
        InvalidCredentialsException: If the email is unknown or the password wrong
        RoleMismatchException: If the account holds a different role
        PendingVerificationException: If a doctor is not approved
        AccountDeactivatedException: If the account is inactive
    """
    if not email or not password or not email.strip():
        raise MissingCredentialsException()

    email = normalize_email(email)
    user = get_user_by_email(db, email)

    if not user:
        # Burn the same hashing time as a real check
        pwd_context.dummy_verify()
        logger.warning(f"Login failed: unknown email {email}")
        raise InvalidCredentialsException()

    if requested_role is not None and requested_role != user.role:
        logger.warning(f"Login failed: role {requested_role.value} requested for user {user.id}")
        raise RoleMismatchException(requested_role.value)

    if user.role == UserRole.DOCTOR:
        doctor = get_doctor_by_user_id(db, user.id)
        if doctor is None or not doctor.is_approved:
            logger.warning(f"Login refused: doctor user {user.id} is not approved")
            raise PendingVerificationException()

    if not user.is_active:
        logger.warning(f"Login refused: user {user.id} is deactivated")
        raise AccountDeactivatedException()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: bad password for user {user.id}")
        raise InvalidCredentialsException()

    claims = SessionClaims(user_id=user.id, role=user.role, email=user.email)
    token = create_session_token(claims.model_dump(mode="json"))

    _stamp_last_login(db, user)
    logger.info(f"Login successful: user {claims.user_id} ({claims.role.value})")

    return token, claims


def resolve_session(db: Session, token: Optional[str]) -> SessionUser:
    """
    Resolve a session token to the live user behind it.

    Verifies signature and expiry, then re-reads the user so deactivation
    takes effect even while the token is still valid.

    Raises:
        InvalidSessionException: If the token is missing, invalid, expired,
            or the user is gone or inactive
    """
    if not token:
        raise InvalidSessionException("Unauthorized - Token Missing")

    payload = verify_session_token(token)
    if not payload:
        raise InvalidSessionException()

    try:
        user_id = int(payload.get("user_id"))
    except (TypeError, ValueError):
        raise InvalidSessionException()

    user = get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise InvalidSessionException("User account suspended or missing.")

    return SessionUser(id=user.id, email=user.email, name=user.full_name, role=user.role)
