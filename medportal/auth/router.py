"""
Authentication routes for the healthcare portal.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from .dependencies import get_current_user
from .schemas import SessionUser, UserLogin
from .service import authenticate, signup

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def set_session_cookie(response: Response, token: str) -> None:
    """Store the session token in an HttpOnly cookie scoped to the whole site."""
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def optional_text(value: Any) -> Optional[str]:
    """Blank or missing optional text is stored as NULL."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@router.post("/login", summary="User Login")
def login_route(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Login endpoint.

    Validates the credentials (and the role chosen on the form, if any),
    then sets the session cookie.

    Status codes: 200 success, 400 missing fields, 401 invalid credentials,
    403 role mismatch, deactivated account or unverified doctor.
    """
    token, claims = authenticate(db, credentials.email, credentials.password, credentials.role)
    set_session_cookie(response, token)
    return {
        "success": True,
        "message": "Authentication successful. Access granted.",
        "data": claims.model_dump(mode="json"),
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED, summary="Patient/Doctor Self-Registration")
def signup_route(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    """
    Self-service registration endpoint.

    Creates the user together with its Patient or Doctor profile. Admin
    accounts are refused outright with 403; invalid input returns 400 with
    every issue; a taken email returns 409.
    """
    user = signup(
        db,
        full_name=payload.get("fullName", payload.get("full_name")),
        email=payload.get("email"),
        password=payload.get("password"),
        role=payload.get("role"),
        phone=optional_text(payload.get("phone")),
    )
    return {
        "success": True,
        "message": "Account provisioned successfully.",
        "data": user.model_dump(mode="json"),
    }


@router.get("/session", summary="Get Current Session")
def session_route(current_user: SessionUser = Depends(get_current_user)):
    """
    Return the identity behind the session cookie, or 401.
    """
    return {"success": True, "data": current_user.model_dump(mode="json")}


@router.post("/logout", summary="User Logout")
def logout_route(response: Response):
    """
    Clear the session cookie. Tokens are not tracked server side.
    """
    clear_session_cookie(response)
    return {"success": True, "message": "Logged out successfully."}
