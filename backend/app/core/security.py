from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
import bcrypt
import secrets

from app.core.config import settings
from app.core.exceptions import TokenExpiredError, InvalidTokenError

TOKEN_TYPE_ACCESS = "access"
TOKEN_PURPOSE_PASSWORD_RESET = "password_reset"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def _encode(to_encode: Dict[str, Any], expires_delta: timedelta) -> str:
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token. ``data`` must carry the user id under ``sub``"""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["type"] = TOKEN_TYPE_ACCESS
    return _encode(to_encode, expires_delta)


def create_reset_token(user_id: str) -> str:
    """Short-lived token that only the reset-password endpoint accepts"""
    return _encode(
        {"sub": user_id, "purpose": TOKEN_PURPOSE_PASSWORD_RESET},
        timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode JWT token.

    Raises TokenExpiredError for a well-formed token past its ``exp`` and
    InvalidTokenError for anything else that fails verification.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()


def generate_verification_code() -> str:
    """Six-digit numeric code for email verification and password reset"""
    return f"{secrets.randbelow(1000000):06d}"
