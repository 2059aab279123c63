"""
Reviews API

- Public listings only ever show approved reviews
- Authors see and edit their own reviews in any state
- Admins additionally see reports (see also /admin/reviews)
"""
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.exceptions import ReviewNotFoundError
from app.models.review import Review, ReviewType, VoteDirection
from app.models.user import User
from app.modules.auth import get_current_admin, get_current_user, get_optional_user
from app.schemas.review import (
    AdminReviewPage,
    OwnReviewResponse,
    ReportCreate,
    ReviewInput,
    ReviewPage,
    ReviewResponse,
    VoteResponse,
)
from app.services.catalog_service import catalog_service
from app.services.review_service import review_service
from app.services.vote_ledger import vote_ledger
from app.utils.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


def _own_view(review: Review) -> OwnReviewResponse:
    return OwnReviewResponse.model_validate(review)


def _vote_result(review: Review, voter: User, message: str) -> VoteResponse:
    current = vote_ledger.current_vote(review, voter.username)
    return VoteResponse(
        message=message,
        upvotes=review.upvotes,
        downvotes=review.downvotes,
        user_vote=current.direction.value if current else None,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewInput = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Submit a course or professor review; it starts in the default moderation state"""
    review = await review_service.create_review(db, payload, current_user)
    return {"message": "Review submitted successfully", "review": _own_view(review)}


@router.get("", response_model=ReviewPage)
async def list_reviews(
    review_type: Optional[ReviewType] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    """Approved reviews, newest first"""
    return await review_service.list_reviews(db, review_type=review_type, page=page, limit=limit)


@router.get("/reported", response_model=AdminReviewPage)
async def list_reported_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Reviews with at least one report, most reported first"""
    return await review_service.list_reported(db, page, limit)


@router.get("/user", response_model=List[OwnReviewResponse])
async def list_my_reviews(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's reviews in every moderation state"""
    return await review_service.list_user_reviews(db, current_user)


@router.get("/department/{department_id}", response_model=ReviewPage)
async def list_department_reviews(
    department_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    department = await catalog_service.get_department(db, department_id)
    return await review_service.list_reviews(
        db, review_type=ReviewType.course, department_id=department.id, page=page, limit=limit
    )


@router.get("/course/{course_id}", response_model=ReviewPage)
async def list_course_reviews(
    course_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    course = await catalog_service.get_course(db, course_id)
    return await review_service.list_reviews(
        db, review_type=ReviewType.course, course_id=course.id, page=page, limit=limit
    )


@router.get("/professor/{professor_id}", response_model=ReviewPage)
async def list_professor_reviews(
    professor_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    professor = await catalog_service.get_professor(db, professor_id)
    return await review_service.list_reviews(
        db, review_type=ReviewType.professor, professor_id=professor.id, page=page, limit=limit
    )


@router.get("/{review_id}")
async def get_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    """
    Approved reviews are public. Pending and rejected reviews are visible only
    to their author and admins; everyone else gets 404.
    """
    review = await review_service.get_review(db, review_id)
    if not review_service.can_view(review, viewer):
        raise ReviewNotFoundError(review_id)

    if viewer is not None and (viewer.is_admin or review_service.is_owner(review, viewer)):
        return _own_view(review)
    return ReviewResponse.model_validate(review)


@router.put("/{review_id}")
async def update_review(
    review_id: str,
    payload: ReviewInput = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Author-only edit; changing ``type`` converts the review"""
    review = await review_service.update_review(db, review_id, payload, current_user)
    return {"message": "Review updated successfully", "review": _own_view(review)}


@router.delete("/{review_id}")
async def delete_review(
    review_id: str,
    username: Optional[str] = Query(None, description="Author username, checked against the review"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await review_service.delete_review(db, review_id, current_user, claimed_username=username)
    return {"message": "Review deleted successfully"}


@router.post("/{review_id}/upvote", response_model=VoteResponse)
async def upvote_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Toggle: upvoting twice removes the vote; an existing downvote is replaced"""
    review = await review_service.vote(db, review_id, current_user, VoteDirection.up)
    return _vote_result(review, current_user, "Vote recorded")


@router.post("/{review_id}/downvote", response_model=VoteResponse)
async def downvote_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    review = await review_service.vote(db, review_id, current_user, VoteDirection.down)
    return _vote_result(review, current_user, "Vote recorded")


@router.post("/{review_id}/report")
async def report_review(
    review_id: str,
    data: ReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """One report per user per review"""
    review = await review_service.report_review(db, review_id, current_user, data.reason, data.details)
    return {"message": "Review reported successfully", "report_count": review.report_count}
