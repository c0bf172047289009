"""
Custom Exceptions for SpacECE Casebook
======================================

Services raise these instead of HTTPException so the same rules hold
whether they are called from an endpoint, a script or a test. The
exception handlers in ``spacece.main`` turn them into the response envelope.

Usage:
    from spacece.core.exceptions import ChildNotFoundError, ForbiddenError

    if not child:
        raise ChildNotFoundError(child_id)
"""

from typing import Optional, Any, Dict


class SpacECEError(Exception):
    """Base exception for all SpacECE errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(SpacECEError):
    """Caller could not be authenticated"""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, code="AUTH_FAILED")


class TokenExpiredError(AuthenticationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """JWT token is invalid"""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class ForbiddenError(SpacECEError):
    """Caller's role or ownership does not allow this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(SpacECEError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, message: str, code: str = "NOT_FOUND", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class ResourceNotFoundError(NotFoundError):
    """A record looked up by id does not exist"""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"No {resource_type.lower()} found with id {resource_id}",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class ChildNotFoundError(ResourceNotFoundError):
    def __init__(self, child_id: str):
        super().__init__("Child", child_id)


class MilestoneNotFoundError(ResourceNotFoundError):
    def __init__(self, milestone_id: str):
        super().__init__("Milestone", milestone_id)


class VisitNotFoundError(ResourceNotFoundError):
    def __init__(self, visit_id: str):
        super().__init__("Visit", visit_id)


class ActivityNotFoundError(ResourceNotFoundError):
    def __init__(self, activity_id: str):
        super().__init__("Activity", activity_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(SpacECEError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


# ============================================
# Anything else
# ============================================

class UnexpectedError(SpacECEError):
    """Unclassified failure, including persistence errors"""

    def __init__(self, message: str = "Server Error"):
        super().__init__(message, code="UNEXPECTED_ERROR")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: SpacECEError, raw_error: Optional[str] = None) -> Dict[str, Any]:
    """
    Convert exception to the API error envelope.

    ``error`` carries the machine-readable code unless a raw error string is
    passed (only done for unexpected errors in DEBUG mode).
    """
    return {
        "success": False,
        "message": error.message,
        "error": raw_error or error.code,
    }
