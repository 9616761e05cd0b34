"""
Auth Schemas - Pydantic models for login input and session/identity output.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..core.types import WireId
from .models import UserRole


class UserLogin(BaseModel):
    """
    User Login Schema - Used for authentication

    Fields are optional so that absent credentials surface as
    MissingCredentials rather than a schema error.

    Fields:
    - email: User's email address
    - password: User's plain text password
    - role: Role selected on the login form (optional)
    """
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None


class SessionClaims(BaseModel):
    """
    Claims embedded in the session token and echoed to the client on login.
    """
    user_id: WireId
    role: UserRole
    email: str


class SessionUser(BaseModel):
    """
    Identity resolved from a verified session token and a live user row.

    Fields:
    - id: User ID
    - email: Email address
    - name: Full name
    - role: User role
    """
    id: WireId
    email: str
    name: str
    role: UserRole


class ProvisionedUser(BaseModel):
    """Minimal identity returned after signup."""
    id: WireId
    email: str
    role: UserRole

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """
    User Response Schema - Used when returning user data to admins

    Never includes the password hash.
    """
    id: WireId
    email: str
    full_name: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
