from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NoTokenError,
    InvalidTokenError,
    TokenUserNotFoundError,
    AccountInactiveError,
    NotAdminError,
)
from app.core.logging_config import set_user_id
from app.core.security import decode_token, TOKEN_TYPE_ACCESS
from app.models.user import User

# auto_error=False so a missing header surfaces as NO_TOKEN instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, db: AsyncSession) -> User:
    payload = decode_token(token)

    if payload.get("type") != TOKEN_TYPE_ACCESS:
        raise InvalidTokenError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Invalid token payload")

    # GUID type handles conversion; an unknown id simply resolves to None
    user = await db.get(User, str(user_id))
    if user is None:
        raise TokenUserNotFoundError()
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user (active accounts only)"""
    if credentials is None or not credentials.credentials:
        raise NoTokenError()

    user = await _resolve_user(credentials.credentials, db)

    if not user.is_active:
        raise AccountInactiveError(user.status.value)

    request.state.user = user
    set_user_id(str(user.id))
    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise NotAdminError()
    return current_user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Current user for public endpoints that show more to authors and admins.

    A missing or unusable token means an anonymous caller, not an error.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await get_current_user(request, credentials, db)
    except (AuthenticationError, AuthorizationError):
        return None
