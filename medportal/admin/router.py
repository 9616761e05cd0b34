"""
Admin Router - User and doctor management endpoints.

Every route requires an ADMIN session.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import require_admin
from ..auth.router import optional_text
from ..auth.schemas import SessionUser, UserResponse
from ..core.pagination import PageParams
from ..core.permissions import parse_role
from ..database import get_db
from ..doctors.schemas import AdminDoctorUpdate, VerificationBucket
from ..doctors.service import (
    admin_delete_doctor,
    admin_update_doctor,
    doctor_stats,
    get_doctor_profile,
    list_doctors,
    to_detail,
)
from ..exceptions import ValidationError
from .schemas import AdminUserUpdate, UserStatusFilter
from .service import (
    admin_create_admin,
    admin_create_user,
    admin_delete_user,
    admin_update_user,
    get_user_or_404,
    list_users,
    user_stats,
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def _user_data(user) -> Dict[str, Any]:
    return UserResponse.model_validate(user).model_dump(mode="json")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users")
def list_users_route(
    page_params: PageParams = Depends(),
    search: Optional[str] = Query(None, description="Name or email substring"),
    role: str = Query("ALL", description="ALL or a role"),
    status_filter: UserStatusFilter = Query(UserStatusFilter.ALL, alias="status"),
    db: Session = Depends(get_db),
):
    """
    Get a paginated list of users
    """
    role = role.strip().upper()
    role_filter = None
    if role != "ALL":
        role_filter = parse_role(role)
        if role_filter is None:
            raise ValidationError("Validation failed", errors=[{"field": "role", "message": "Unknown role"}])

    result = list_users(db, page_params, search=search, role=role_filter, status_filter=status_filter)
    return {"success": True, "data": result.model_dump(mode="json")}


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user_route(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(require_admin),
):
    """
    Create a user of any role. No Patient/Doctor profile row is created.
    """
    user = admin_create_user(
        db,
        full_name=payload.get("fullName", payload.get("full_name")),
        email=payload.get("email"),
        password=payload.get("password"),
        role=payload.get("role"),
        phone=optional_text(payload.get("phone")),
        created_by=current_user.id,
    )
    return {"success": True, "message": "User created successfully.", "data": _user_data(user)}


@router.get("/users/stats")
def user_stats_route(db: Session = Depends(get_db)):
    return {"success": True, "data": user_stats(db).model_dump()}


@router.post("/users/admin", status_code=status.HTTP_201_CREATED)
def create_admin_route(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(require_admin),
):
    """
    Create another administrator account
    """
    user = admin_create_admin(
        db,
        full_name=payload.get("fullName", payload.get("full_name")),
        email=payload.get("email"),
        password=payload.get("password"),
        phone=optional_text(payload.get("phone")),
        created_by=current_user.id,
    )
    return {"success": True, "message": "Admin created successfully.", "data": _user_data(user)}


@router.get("/users/{user_id}")
def get_user_route(user_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": _user_data(get_user_or_404(db, user_id))}


@router.put("/users/{user_id}")
def update_user_route(user_id: int, update: AdminUserUpdate, db: Session = Depends(get_db)):
    """
    Partially update a user; only the fields sent are written
    """
    user = admin_update_user(db, user_id, update)
    return {"success": True, "message": "User updated successfully.", "data": _user_data(user)}


@router.delete("/users/{user_id}")
def delete_user_route(user_id: int, db: Session = Depends(get_db)):
    admin_delete_user(db, user_id)
    return {"success": True, "message": "User deleted successfully."}


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------

@router.get("/doctors")
def list_doctors_route(
    page_params: PageParams = Depends(),
    search: Optional[str] = Query(None, description="Name or email substring"),
    bucket: VerificationBucket = Query(VerificationBucket.ALL, alias="verifyStatus"),
    db: Session = Depends(get_db),
):
    """
    Get a paginated list of doctors filtered by verification bucket
    """
    result = list_doctors(db, page_params, search=search, bucket=bucket)
    return {"success": True, "data": result.model_dump(mode="json")}


@router.get("/doctors/stats")
def doctor_stats_route(db: Session = Depends(get_db)):
    return {"success": True, "data": doctor_stats(db).model_dump()}


@router.get("/doctors/{doctor_id}")
def get_doctor_route(doctor_id: int, db: Session = Depends(get_db)):
    """
    Get one doctor's full profile merged with the user fields
    """
    doctor = get_doctor_profile(db, doctor_id)
    return {"success": True, "data": to_detail(doctor).model_dump(mode="json")}


@router.put("/doctors/{doctor_id}")
def update_doctor_route(doctor_id: int, update: AdminDoctorUpdate, db: Session = Depends(get_db)):
    """
    Update a doctor's account, profile and verification status together
    """
    doctor = admin_update_doctor(db, doctor_id, update)
    return {
        "success": True,
        "message": "Doctor updated successfully.",
        "data": to_detail(doctor).model_dump(mode="json"),
    }


@router.delete("/doctors/{doctor_id}")
def delete_doctor_route(doctor_id: int, db: Session = Depends(get_db)):
    admin_delete_doctor(db, doctor_id)
    return {"success": True, "message": "Doctor deleted successfully."}
