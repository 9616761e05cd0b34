"""
Global exception handlers and custom exception classes.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Set up logging
logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.

    Subclasses pin the HTTP status and the stable error code reported to
    clients; ``detail`` is the human-readable message.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "InternalError"
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.detail = detail or self.default_detail
        self.errors = errors
        super().__init__(self.detail)


class ValidationError(AppException):
    """Malformed input. Always carries every violation, not just the first."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "ValidationError"
    default_detail = "Validation failed"


class ConflictError(AppException):
    """Duplicate unique key or a state change that is not allowed."""
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
    default_detail = "Resource already exists"


class UnauthorizedError(AppException):
    """Missing, invalid, or expired session."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    default_detail = "Unauthorized"


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_detail = "Permission denied"


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"
    default_detail = "Resource not found"


class ConstraintError(AppException):
    """Deletion blocked by dependent rows."""
    status_code = status.HTTP_409_CONFLICT
    error = "ConstraintError"
    default_detail = "Operation blocked by related records"


class InternalError(AppException):
    pass


def error_body(error: str, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error, "message": message}
    if errors:
        body["errors"] = errors
    return body


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    if exc.status_code >= 500:
        logger.error(f"Application error on {request.method} {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{exc.error} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.detail, exc.errors),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Reported as a 400 ValidationError listing every issue pydantic found.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    logger.info(f"Request validation failed on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationError.error, ValidationError.default_detail, errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: log the failure, never leak it to the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(InternalError.error, InternalError.default_detail),
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
