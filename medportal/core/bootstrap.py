"""
Bootstrap utilities for first admin creation.
Handles automatic creation of the first admin user from environment variables.
"""
import logging

from sqlalchemy.orm import Session

from ..auth.models import User, UserRole
from ..auth.service import create_account
from ..config import Settings, settings as default_settings
from ..exceptions import AppException
from .security import normalize_email

logger = logging.getLogger(__name__)


def admin_exists(db: Session) -> bool:
    """
    Check if any admin user exists in the database.

    Returns:
        bool: True if at least one admin exists, False otherwise
    """
    return db.query(User).filter(User.role == UserRole.ADMIN).count() > 0


def create_bootstrap_admin(db: Session, settings: Settings = default_settings) -> bool:
    """
    Create the first admin user from the configured credentials.

    Returns:
        bool: True if admin was created successfully, False otherwise
    """
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.warning("Bootstrap admin credentials not provided in environment variables")
        return False

    email = normalize_email(settings.bootstrap_admin_email)
    try:
        admin = create_account(
            db,
            full_name=settings.bootstrap_admin_name,
            email=email,
            password=settings.bootstrap_admin_password,
            role=UserRole.ADMIN,
            with_profile=False,
        )
    except AppException as e:
        logger.error(f"Failed to create bootstrap admin {email}: {e.detail}")
        return False

    logger.info(f"Bootstrap admin created: {admin.email} (ID: {admin.id})")
    return True


def bootstrap_admin_if_needed(db: Session, settings: Settings = default_settings) -> None:
    """
    Check if admin exists and create bootstrap admin if needed.
    This function should be called during application startup.
    """
    if admin_exists(db):
        logger.info("Admin users found. Bootstrap not needed.")
        return

    logger.info("No admin users found. Attempting bootstrap admin creation...")
    if not create_bootstrap_admin(db, settings):
        logger.warning(
            "Bootstrap admin creation skipped. Set BOOTSTRAP_ADMIN_EMAIL and "
            "BOOTSTRAP_ADMIN_PASSWORD to create the first admin."
        )
