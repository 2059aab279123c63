"""
Custom Exceptions for UniRate
=============================

Use these instead of HTTPException or generic Exception so that every
failure leaves the API in the same envelope:

    {"message": "...", "error": "<CODE>"}

Usage:
    from app.core.exceptions import CourseNotFoundError, NotReviewOwnerError

    if not course:
        raise CourseNotFoundError(course_id)

    if review.user_id != current_user.id:
        raise NotReviewOwnerError()

The handlers registered in app.main turn these into JSON responses using
``status_code``.
"""

from typing import Optional, Any, Dict


class UniRateError(Exception):
    """Base exception for all UniRate errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication Errors (401)
# ============================================

class AuthenticationError(UniRateError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", code: str = "AUTH_FAILED"):
        super().__init__(message, code=code)


class NoTokenError(AuthenticationError):
    """Request carried no bearer token"""

    def __init__(self):
        super().__init__("No token, authorization denied")
        self.code = "NO_TOKEN"


class TokenExpiredError(AuthenticationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """JWT token is invalid"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class TokenUserNotFoundError(AuthenticationError):
    """Token is valid but its user no longer exists"""

    def __init__(self):
        super().__init__("User not found")
        self.code = "USER_NOT_FOUND"


class InvalidCredentialsError(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid credentials")
        self.code = "INVALID_CREDENTIALS"


# ============================================
# Authorization Errors (403)
# ============================================

class AuthorizationError(UniRateError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized", code: str = "NOT_AUTHORIZED"):
        super().__init__(message, code=code)


class AccountInactiveError(AuthorizationError):
    """Suspended or banned account"""

    def __init__(self, status: str = "inactive"):
        super().__init__(f"Account is {status}")
        self.code = "ACCOUNT_INACTIVE"
        self.details["status"] = status


class NotAdminError(AuthorizationError):
    def __init__(self):
        super().__init__("Admin access required")
        self.code = "NOT_ADMIN"


class NotReviewOwnerError(AuthorizationError):
    def __init__(self):
        super().__init__("You can only modify your own reviews")
        self.code = "NOT_REVIEW_OWNER"


class AdminProtectedError(AuthorizationError):
    """Admin accounts cannot be suspended or demoted through the console"""

    def __init__(self):
        super().__init__("Cannot modify an admin account")
        self.code = "ADMIN_PROTECTED"


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(UniRateError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class DepartmentNotFoundError(ResourceNotFoundError):
    """Department not found"""

    def __init__(self, department_id: str):
        super().__init__("Department", department_id)


class CourseNotFoundError(ResourceNotFoundError):
    """Course not found"""

    def __init__(self, course_id: str):
        super().__init__("Course", course_id)


class ProfessorNotFoundError(ResourceNotFoundError):
    """Professor not found"""

    def __init__(self, professor_id: str):
        super().__init__("Professor", professor_id)


class ReviewNotFoundError(ResourceNotFoundError):
    """Review not found"""

    def __init__(self, review_id: str):
        super().__init__("Review", review_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(UniRateError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConflictError(ValidationError):
    """A uniqueness rule would be violated"""

    def __init__(self, message: str, code: str = "CONFLICT", field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = code


class InappropriateContentError(ValidationError):
    def __init__(self):
        super().__init__("Review contains inappropriate content")
        self.code = "INAPPROPRIATE_CONTENT"


class CourseDepartmentMismatchError(ValidationError):
    def __init__(self):
        super().__init__("Course does not belong to the specified department")
        self.code = "COURSE_DEPARTMENT_MISMATCH"


class AlreadyReportedError(ValidationError):
    def __init__(self):
        super().__init__("You have already reported this review")
        self.code = "ALREADY_REPORTED"


class QueryRequiredError(ValidationError):
    def __init__(self):
        super().__init__("Search query is required", field="query")
        self.code = "QUERY_REQUIRED"


class DependentRecordsError(ValidationError):
    """Deletion blocked because other records still reference the target"""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


class VerificationCodeError(ValidationError):
    """Signup or reset code rejected (unknown, expired or wrong)"""

    def __init__(self, message: str, code: str = "INVALID_VERIFICATION_CODE"):
        super().__init__(message, field="code")
        self.code = code


class RecaptchaError(ValidationError):
    def __init__(self, message: str = "reCAPTCHA verification failed", code: str = "INVALID_RECAPTCHA"):
        super().__init__(message)
        self.code = code


# ============================================
# Delivery Errors
# ============================================

class EmailDeliveryError(UniRateError):
    """Outbound email could not be sent"""

    status_code = 500

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message, code="EMAIL_DELIVERY_FAILED")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: UniRateError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    body: Dict[str, Any] = {
        "message": error.message,
        "error": error.code,
    }
    if error.details:
        body["details"] = error.details
    return body
