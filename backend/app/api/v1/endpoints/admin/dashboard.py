"""
Admin Dashboard endpoints - platform statistics.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import timedelta

from app.core.database import get_db
from app.core.types import utcnow
from app.models import User, UserStatus, Review, Course, Professor, Department
from app.modules.auth import get_current_admin
from app.schemas.admin import PlatformStats
from app.services.review_service import review_service

router = APIRouter()


@router.get("/stats", response_model=PlatformStats)
async def get_platform_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """User and content counts, plus activity over the last 30 days"""
    since = utcnow() - timedelta(days=30)

    # User stats
    total_users = await db.scalar(select(func.count(User.id)))
    status_rows = await db.execute(select(User.status, func.count(User.id)).group_by(User.status))
    by_status = {s.value: 0 for s in UserStatus}
    for user_status, count in status_rows.all():
        by_status[user_status.value] = count
    new_users = await db.scalar(select(func.count(User.id)).where(User.created_at >= since))

    # Content stats
    review_counts = await review_service.count_by_status(db)
    reported_reviews = await db.scalar(select(func.count(Review.id)).where(Review.report_count > 0))
    new_reviews = await db.scalar(select(func.count(Review.id)).where(Review.created_at >= since))

    return PlatformStats(
        users={
            "total": total_users or 0,
            "active": by_status[UserStatus.active.value],
            "suspended": by_status[UserStatus.suspended.value],
            "banned": by_status[UserStatus.banned.value],
            "new_in_last_30_days": new_users or 0,
        },
        content={
            "reviews": sum(review_counts.values()),
            "pending_reviews": review_counts["pending"],
            "reported_reviews": reported_reviews or 0,
            "courses": await db.scalar(select(func.count(Course.id))) or 0,
            "professors": await db.scalar(select(func.count(Professor.id))) or 0,
            "departments": await db.scalar(select(func.count(Department.id))) or 0,
            "new_reviews_in_last_30_days": new_reviews or 0,
        },
    )
