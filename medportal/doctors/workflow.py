"""
Doctor verification workflow transitions.
"""
from typing import Union

from ..exceptions import ConflictError, ValidationError
from .models import ADMIN_SETTABLE_STATUSES, PRE_APPROVAL_STATUSES, Doctor, VerificationStatus


def submit_for_review(doctor: Doctor) -> None:
    """
    Doctor action: move a pre-approval profile to SUBMITTED.

    Raises:
        ConflictError: If the profile is already approved, rejected or suspended
    """
    if doctor.verification_status not in PRE_APPROVAL_STATUSES:
        raise ConflictError(
            f"A profile in status {doctor.verification_status.value} cannot be submitted for review"
        )
    doctor.verification_status = VerificationStatus.SUBMITTED


def apply_admin_status(doctor: Doctor, target: Union[str, VerificationStatus]) -> None:
    """
    Admin action: set the verification status directly.

    Raises:
        ValidationError: If the target is not one an admin may set
        ConflictError: If suspending a doctor who is not approved
    """
    try:
        target = VerificationStatus(target)
    except ValueError:
        raise ValidationError(errors=[{"field": "verification_status", "message": f"Unknown status '{target}'"}])

    if target not in ADMIN_SETTABLE_STATUSES:
        allowed = ", ".join(status.value for status in ADMIN_SETTABLE_STATUSES)
        raise ValidationError(
            errors=[{"field": "verification_status", "message": f"Admins may only set: {allowed}"}]
        )

    if target == VerificationStatus.SUSPENDED and doctor.verification_status not in (
        VerificationStatus.APPROVED,
        VerificationStatus.SUSPENDED,
    ):
        raise ConflictError("Only approved doctors can be suspended")

    doctor.verification_status = target
