"""
Core security utilities for session tokens, password hashing and credential rules.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import logging

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case an email; the only form ever stored or looked up."""
    return (email or "").strip().lower()


def validate_password_strength(password: Optional[str]) -> List[str]:
    """
    Validate password strength.

    Args:
        password: Password to validate

    Returns:
        List[str]: One message per violated rule, empty when the password is acceptable
    """
    password = password or ""
    errors = []

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if not any(c.isupper() for c in password):
        errors.append("Password must contain at least one uppercase letter")

    if not any(c.isdigit() for c in password):
        errors.append("Password must contain at least one number")

    return errors


def create_session_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to encode ({user_id, role, email})
        expires_delta: Token lifetime, defaults to the configured session length

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.session_expire_days))
    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_session_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify signature and expiry of a session token.

    Args:
        token: JWT token string

    Returns:
        Dict containing token payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def decode_unverified_claims(token: str) -> Dict[str, Any]:
    """
    Read a token payload without checking its signature or expiry.

    Only for redirect decisions at the edge; authorization always goes through
    :func:`verify_session_token`.

    Raises:
        JWTError: If the token is not a decodable JWT
    """
    return jwt.get_unverified_claims(token)
