"""
Review schemas

Incoming reviews are a tagged union on ``type``: a course review names a
course and its department, a professor review names a professor.
"""
from pydantic import BaseModel, Field
from typing import Annotated, Optional, List, Literal, Union
from datetime import datetime

from app.models.review import ReviewType, ReviewStatus
from app.schemas.catalog import DepartmentSummary, CourseSummary, ProfessorSummary
from app.utils.pagination import PaginationMeta


class _ReviewFields(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review_text: str = Field(..., min_length=1, max_length=5000)
    is_anonymous: bool = False
    # Optional echo of the author's username; a mismatch is treated as not-owner
    username: Optional[str] = None


class CourseReviewInput(_ReviewFields):
    type: Literal["course"]
    course: str = Field(..., description="Course id")
    department: str = Field(..., description="Department id")
    # Course titles are generated from the course, a supplied one is ignored
    title: Optional[str] = None


class ProfessorReviewInput(_ReviewFields):
    type: Literal["professor"]
    professor: str = Field(..., description="Professor id")
    title: Optional[str] = Field(None, max_length=500)


ReviewInput = Annotated[
    Union[CourseReviewInput, ProfessorReviewInput],
    Field(discriminator="type"),
]


class ReportCreate(BaseModel):
    reason: str = Field(..., min_length=1, max_length=255)
    details: Optional[str] = Field(None, max_length=2000)


class ReportResponse(BaseModel):
    reporter: str
    reason: str
    details: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewResponse(BaseModel):
    """Public view of a review; the author's username is hidden for anonymous reviews"""
    id: str
    type: ReviewType
    title: str
    rating: int
    review_text: str
    display_name: str
    is_anonymous: bool
    course: Optional[CourseSummary] = None
    department: Optional[DepartmentSummary] = None
    professor: Optional[ProfessorSummary] = None
    upvotes: int
    downvotes: int
    status: ReviewStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OwnReviewResponse(ReviewResponse):
    """Returned to the author and to admins"""
    user_id: str
    username: str
    report_count: int = 0


class AdminReviewResponse(OwnReviewResponse):
    reports: List[ReportResponse] = []


class VoteResponse(BaseModel):
    message: str
    upvotes: int
    downvotes: int
    user_vote: Optional[Literal["up", "down"]] = None


class ReviewPage(BaseModel):
    items: List[ReviewResponse]
    pagination: PaginationMeta


class AdminReviewPage(BaseModel):
    items: List[AdminReviewResponse]
    pagination: PaginationMeta
