"""
Admin Schemas - Pydantic models for the admin user management endpoints.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from ..auth.models import UserRole
from ..auth.schemas import UserResponse


class UserStatusFilter(str, Enum):
    ALL = "ALL"
    ACTIVE = "active"
    INACTIVE = "inactive"


class AdminUserUpdate(BaseModel):
    """
    Partial update of a user by an admin; absent fields stay untouched.
    """
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserListResponse(BaseModel):
    users: List[UserResponse]
    totalCount: int
    page: int
    totalPages: int


class UserStats(BaseModel):
    totalUsers: int
    activeDoctors: int
    totalPatients: int
    inactiveAccounts: int
