# Re-export all models for convenient imports
from app.models.user import User, UserRole, UserStatus
from app.models.department import Department
from app.models.course import Course
from app.models.professor import Professor, professor_departments, professor_courses
from app.models.review import (
    Review,
    ReviewType,
    ReviewStatus,
    ReviewVote,
    ReviewReport,
    VoteDirection,
    ANONYMOUS_DISPLAY_NAME,
)
from app.models.pending_verification import PendingVerification, VerificationPurpose

__all__ = [
    # User
    "User",
    "UserRole",
    "UserStatus",
    # Catalog
    "Department",
    "Course",
    "Professor",
    "professor_departments",
    "professor_courses",
    # Reviews
    "Review",
    "ReviewType",
    "ReviewStatus",
    "ReviewVote",
    "ReviewReport",
    "VoteDirection",
    "ANONYMOUS_DISPLAY_NAME",
    # Verification
    "PendingVerification",
    "VerificationPurpose",
]
