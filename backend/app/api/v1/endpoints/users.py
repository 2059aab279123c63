"""
User profile endpoints (always the authenticated user)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth import get_current_user
from app.schemas.auth import ProfileUpdate, UserResponse
from app.schemas.review import OwnReviewResponse
from app.services.auth_service import auth_service
from app.services.review_service import review_service

router = APIRouter()


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return {"user": UserResponse.model_validate(current_user)}


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update name and/or username; a new username is applied to existing reviews too"""
    user = await auth_service.update_profile(db, current_user, data)
    return {
        "message": "Profile updated successfully",
        "user": UserResponse.model_validate(user),
    }


@router.get("/reviews")
async def get_my_reviews(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    reviews = await review_service.list_user_reviews(db, current_user)
    return {"reviews": [OwnReviewResponse.model_validate(r) for r in reviews]}


@router.get("/check-auth")
async def check_auth(current_user: User = Depends(get_current_user)):
    """Succeeds for any active, authenticated user"""
    return {
        "is_authenticated": True,
        "user": UserResponse.model_validate(current_user),
    }
