"""
Core permissions utilities for role-based access control.

Maps each role to the page area it owns and lists the pages that only
anonymous visitors should see.
"""
from typing import Dict, Optional

from ..auth.models import UserRole

LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"

# Pages only meant for anonymous visitors
AUTH_ONLY_PATHS = (LOGIN_PATH, SIGNUP_PATH)

# Role-based home mapping; each home is also the role's protected prefix
ROLE_HOME_PATHS: Dict[UserRole, str] = {
    UserRole.ADMIN: "/admin",
    UserRole.DOCTOR: "/doctor",
    UserRole.PATIENT: "/patient",
}

# Roles allowed to sign themselves up
SELF_SERVICE_ROLES = (UserRole.PATIENT, UserRole.DOCTOR)


def home_path_for(role: UserRole) -> str:
    """
    Get the landing page for a role.

    Args:
        role: User role

    Returns:
        str: Path of the role's dashboard
    """
    return ROLE_HOME_PATHS[role]


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def role_for_path(path: str) -> Optional[UserRole]:
    """
    Find the role that owns a path.

    Args:
        path: Request path

    Returns:
        The owning role, or None when the path is not role-scoped
    """
    for role, prefix in ROLE_HOME_PATHS.items():
        if _under(path, prefix):
            return role
    return None


def is_auth_only_path(path: str) -> bool:
    return path in AUTH_ONLY_PATHS


def parse_role(value) -> Optional[UserRole]:
    """Return the UserRole for a raw value, or None if it names no role."""
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(value)
    except (TypeError, ValueError):
        return None
