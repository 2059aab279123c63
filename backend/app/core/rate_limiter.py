"""
Rate Limiting for the UniRate API
=================================
Implements rate limiting using slowapi (in-memory storage by default,
RATE_LIMIT_STORAGE_URI points it elsewhere).

Every client gets RATE_LIMIT_PER_MINUTE requests per minute. Endpoints that
send email or check passwords carry tighter limits of their own:
- /auth/login: 5 req/min (brute force protection)
- /auth/send-verification-code: 3 req/min
- /auth/forgot-password: 3 req/min
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger

AUTH_LIMIT = "5/minute"
STRICT_LIMIT = "3/minute"


def get_user_identifier(request: Request) -> str:
    """
    Get rate limit key.

    Authenticated requests are keyed by user id (set on request.state by the
    auth dependency), everything else by client IP.
    """
    user = getattr(request.state, 'user', None)
    if user is not None:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return the standard error envelope with a Retry-After header"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "message": "Too many requests. Please slow down.",
            "error": "RATE_LIMITED",
            "detail": str(exc.detail),
        },
        headers={"Retry-After": "60"},
    )


def auth_rate_limit():
    """Rate limit for credential checks (5/min)"""
    return limiter.limit(AUTH_LIMIT)


def strict_rate_limit():
    """Rate limit for endpoints that send email (3/min)"""
    return limiter.limit(STRICT_LIMIT)
