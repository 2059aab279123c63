from pydantic import BaseModel
from typing import List

from app.models.user import UserRole, UserStatus
from app.schemas.auth import UserResponse
from app.utils.pagination import PaginationMeta


# ==================== Dashboard Schemas ====================

class UserStats(BaseModel):
    total: int
    active: int
    suspended: int
    banned: int
    new_in_last_30_days: int


class ContentStats(BaseModel):
    reviews: int
    pending_reviews: int
    reported_reviews: int
    courses: int
    professors: int
    departments: int
    new_reviews_in_last_30_days: int


class PlatformStats(BaseModel):
    users: UserStats
    content: ContentStats


# ==================== User Management Schemas ====================

class UserStatusUpdate(BaseModel):
    user_id: str
    status: UserStatus


class UserRoleUpdate(BaseModel):
    user_id: str
    role: UserRole


class UserPage(BaseModel):
    items: List[UserResponse]
    pagination: PaginationMeta
