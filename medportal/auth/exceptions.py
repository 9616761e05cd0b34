"""
Authentication-specific exceptions.
"""
from ..exceptions import ConflictError, ForbiddenError, UnauthorizedError, ValidationError


class MissingCredentialsException(ValidationError):
    """Exception raised when email or password is absent."""
    error = "MissingCredentials"
    default_detail = "Email and password are required fields."


class InvalidCredentialsException(UnauthorizedError):
    """Exception raised when credentials are invalid. Never says which one."""
    error = "InvalidCredentials"
    default_detail = "Invalid credentials"


class RoleMismatchException(ForbiddenError):
    """Exception raised when the login form role differs from the account role."""
    error = "RoleMismatch"

    def __init__(self, requested_role: str):
        super().__init__(f"No {requested_role} account exists with this email")


class PendingVerificationException(ForbiddenError):
    """Exception raised when a doctor account has not been approved yet."""
    error = "PendingVerification"
    default_detail = "Your doctor account is pending verification by an administrator."


class AccountDeactivatedException(ForbiddenError):
    """Exception raised when the account has been deactivated."""
    error = "AccountDeactivated"
    default_detail = "This account has been deactivated. Please contact support."


class ForbiddenRoleException(ForbiddenError):
    """Exception raised on a self-service attempt to create an admin."""
    error = "ForbiddenRole"
    default_detail = "Administrative accounts cannot be created via public registration."


class EmailAlreadyExistsException(ConflictError):
    """Exception raised when email already exists."""
    default_detail = "A user with this email already exists"


class InvalidSessionException(UnauthorizedError):
    """Exception raised when the session token is missing, invalid or expired."""
    default_detail = "Your session token was expired or corrupt."
