"""
Doctor Router - Self-service endpoints for the signed-in doctor.

Doctor registration goes through /api/auth/signup; admin management of
doctors lives in the admin router.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth.dependencies import require_doctor
from ..auth.schemas import SessionUser
from ..database import get_db
from .schemas import DoctorProfileUpdate
from .service import get_doctor_profile_by_user_id, to_detail, update_own_profile

router = APIRouter(prefix="/api/doctor", tags=["Doctor"])


@router.get("/profile")
def get_my_doctor_profile(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(require_doctor),
):
    """
    Get the current doctor's profile
    """
    doctor = get_doctor_profile_by_user_id(db, current_user.id)
    return {"success": True, "data": to_detail(doctor).model_dump(mode="json")}


@router.put("/profile")
def update_my_doctor_profile(
    profile_data: DoctorProfileUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(require_doctor),
):
    """
    Update the current doctor's profile

    Send ``"action": "SUBMIT_FOR_REVIEW"`` to hand a draft profile to the
    admins for verification.
    """
    doctor = update_own_profile(db, current_user.id, profile_data)
    return {
        "success": True,
        "message": "Profile successfully updated.",
        "data": to_detail(doctor).model_dump(mode="json"),
    }
