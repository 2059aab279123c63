# Pydantic schemas
from app.schemas.auth import (
    SendVerificationCodeRequest,
    VerifyCodeRequest,
    UserLogin,
    ForgotPasswordRequest,
    VerifyResetCodeRequest,
    ResetPasswordRequest,
    UserResponse,
    TokenResponse,
    LoginResponse,
    MessageResponse,
    ProfileUpdate,
)
from app.schemas.catalog import (
    DepartmentCreate,
    DepartmentUpdate,
    DepartmentSummary,
    DepartmentResponse,
    CourseCreate,
    CourseUpdate,
    CourseSummary,
    CourseResponse,
    ProfessorCreate,
    ProfessorUpdate,
    ProfessorSummary,
    ProfessorResponse,
)
from app.schemas.review import (
    CourseReviewInput,
    ProfessorReviewInput,
    ReviewInput,
    ReportCreate,
    ReviewResponse,
    OwnReviewResponse,
    AdminReviewResponse,
    VoteResponse,
    ReviewPage,
    AdminReviewPage,
)
from app.schemas.search import SearchResults, Suggestion
from app.schemas.admin import PlatformStats, UserStatusUpdate, UserRoleUpdate, UserPage
