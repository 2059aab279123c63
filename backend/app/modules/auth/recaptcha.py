"""Google reCAPTCHA verification for signup requests."""

import httpx
from typing import Optional

from app.core.config import settings
from app.core.exceptions import RecaptchaError, UniRateError
from app.core.logging_config import logger


async def verify_recaptcha(token: Optional[str], remote_ip: Optional[str] = None) -> None:
    """
    Check a reCAPTCHA response token with Google's siteverify endpoint.

    No-op when reCAPTCHA is not configured (or skipped in development).
    Raises RecaptchaError with RECAPTCHA_REQUIRED or INVALID_RECAPTCHA.
    """
    if not settings.recaptcha_enabled():
        return

    if not token:
        raise RecaptchaError("reCAPTCHA verification failed", code="RECAPTCHA_REQUIRED")

    data = {"secret": settings.RECAPTCHA_SECRET_KEY, "response": token}
    if remote_ip:
        data["remoteip"] = remote_ip

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(settings.RECAPTCHA_VERIFY_URL, data=data)
            response.raise_for_status()
            result = response.json()
    except httpx.HTTPError as e:
        logger.log_error_with_context(e, context="recaptcha_verify")
        raise UniRateError(
            "reCAPTCHA verification error",
            code="RECAPTCHA_UNAVAILABLE",
            status_code=500,
        ) from e

    if not result.get("success"):
        logger.log_auth_event(
            event="recaptcha",
            success=False,
            reason=",".join(result.get("error-codes", [])) or "rejected"
        )
        raise RecaptchaError()
