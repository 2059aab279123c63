"""
Admin User Management endpoints.

Admin accounts are protected: their status and role cannot be changed here.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import AdminProtectedError, UserNotFoundError
from app.core.logging_config import logger
from app.models import User
from app.modules.auth import get_current_admin
from app.schemas.admin import UserPage, UserRoleUpdate, UserStatusUpdate
from app.schemas.auth import UserResponse
from app.utils.pagination import paginate, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


async def _get_managed_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    if user.is_admin:
        raise AdminProtectedError()
    return user


@router.get("", response_model=UserPage)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """List users, newest first, optionally filtered by name, username or email"""
    query = select(User)
    if search:
        query = query.where(or_(
            User.name.icontains(search, autoescape=True),
            User.username.icontains(search, autoescape=True),
            User.email.icontains(search, autoescape=True),
        ))
    query = query.order_by(User.created_at.desc())
    return await paginate(db, query, page, limit)


@router.put("/status")
async def update_user_status(
    data: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Activate, suspend or ban a user"""
    user = await _get_managed_user(db, data.user_id)
    user.status = data.status
    await db.commit()

    logger.info(
        f"[Admin] {current_admin.username} set status of {user.username} to {data.status.value}",
        extra={"event_type": "admin_user_status", "target_user_id": str(user.id)}
    )
    return {
        "message": f"User status updated to {data.status.value}",
        "user": UserResponse.model_validate(user),
    }


@router.put("/role")
async def update_user_role(
    data: UserRoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    user = await _get_managed_user(db, data.user_id)
    user.role = data.role
    await db.commit()

    logger.info(
        f"[Admin] {current_admin.username} set role of {user.username} to {data.role.value}",
        extra={"event_type": "admin_user_role", "target_user_id": str(user.id)}
    )
    return {
        "message": f"User role updated to {data.role.value}",
        "user": UserResponse.model_validate(user),
    }
