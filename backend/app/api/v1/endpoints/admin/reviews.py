"""
Admin Review Moderation endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models import User, ReviewStatus
from app.modules.auth import get_current_admin
from app.schemas.review import AdminReviewPage, AdminReviewResponse
from app.services.review_service import review_service
from app.utils.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=AdminReviewPage)
async def list_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: Optional[ReviewStatus] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """All reviews in any state, newest first"""
    return await review_service.admin_list(db, status=status, search=search, page=page, limit=limit)


@router.get("/reported", response_model=AdminReviewPage)
async def list_reported_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await review_service.list_reported(db, page, limit)


@router.patch("/{review_id}/approve")
async def approve_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    review = await review_service.approve(db, review_id, current_admin)
    return {"message": "Review approved", "review": AdminReviewResponse.model_validate(review)}


@router.patch("/{review_id}/reject")
async def reject_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    review = await review_service.reject(db, review_id, current_admin)
    return {"message": "Review rejected", "review": AdminReviewResponse.model_validate(review)}


@router.patch("/{review_id}/clear-reports")
async def clear_review_reports(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    review = await review_service.clear_reports(db, review_id, current_admin)
    return {"message": "Reports cleared", "review": AdminReviewResponse.model_validate(review)}


@router.delete("/{review_id}")
async def delete_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    await review_service.delete_review(db, review_id, current_admin)
    return {"message": "Review deleted successfully"}
