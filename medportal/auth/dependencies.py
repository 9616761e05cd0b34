"""
FastAPI dependencies for authentication and authorization.

Every protected API route resolves the session here, with full signature,
expiry and liveness checks.
"""
from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..exceptions import ForbiddenError
from .models import UserRole
from .schemas import SessionUser
from .service import resolve_session

# Bearer header is a fallback for API clients that do not carry cookies
bearer_scheme = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Session cookie first, then an Authorization: Bearer header."""
    token = request.cookies.get(settings.cookie_name)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> SessionUser:
    """
    Get current authenticated user from the session token.

    Raises:
        InvalidSessionException: If the session cannot be resolved
    """
    return resolve_session(db, token)


def require_roles(allowed_roles: List[UserRole]):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: List of roles that are allowed access

    Returns:
        Function that checks if user has required role
    """
    def role_checker(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
        if current_user.role not in allowed_roles:
            raise ForbiddenError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}. "
                f"Your role: {current_user.role.value}"
            )
        return current_user
    return role_checker


# Convenience dependencies for specific roles
require_admin = require_roles([UserRole.ADMIN])
require_doctor = require_roles([UserRole.DOCTOR])
