from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging_config import set_user_id
from app.core.rate_limiter import limiter, AUTH_LIMIT, STRICT_LIMIT
from app.models.user import User
from app.schemas.auth import (
    SendVerificationCodeRequest,
    VerifyCodeRequest,
    UserLogin,
    ForgotPasswordRequest,
    VerifyResetCodeRequest,
    ResetPasswordRequest,
    UserResponse,
    TokenResponse,
    LoginResponse,
    MessageResponse,
)
from app.modules.auth import get_current_user, verify_recaptcha
from app.services.auth_service import auth_service, RESET_REQUEST_MESSAGE

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/send-verification-code", response_model=MessageResponse)
@limiter.limit(STRICT_LIMIT)
async def send_verification_code(
    request: Request,
    data: SendVerificationCodeRequest,
    db: AsyncSession = Depends(get_db)
):
    """Start signup: email a verification code (rate limited: 3/min)"""
    await verify_recaptcha(data.recaptcha_token, remote_ip=_client_ip(request))
    await auth_service.send_signup_code(db, data)
    return {"message": "Verification code sent successfully"}


@router.post("/verify-code", response_model=LoginResponse)
@limiter.limit(AUTH_LIMIT)
async def verify_code(
    request: Request,
    data: VerifyCodeRequest,
    db: AsyncSession = Depends(get_db)
):
    """Finish signup: create the account and sign the user in"""
    user, token = await auth_service.confirm_signup(db, data.email, data.code)
    set_user_id(str(user.id))
    return {
        "message": "Email verified and user registered successfully",
        "token": token,
        "token_type": "bearer",
        "user": user,
    }


@router.post("/login", response_model=LoginResponse)
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login user (rate limited: 5/min)"""
    user, token = await auth_service.login(
        db, credentials.email, credentials.password, client_ip=_client_ip(request)
    )
    set_user_id(str(user.id))
    return {
        "message": "Login successful",
        "token": token,
        "token_type": "bearer",
        "user": user,
    }


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user info"""
    return current_user


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(STRICT_LIMIT)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Request a password reset code.

    The response is the same whether or not the email is registered.
    """
    await auth_service.request_password_reset(db, data.email)
    return {"message": RESET_REQUEST_MESSAGE}


@router.post("/verify-reset-code", response_model=TokenResponse)
@limiter.limit(AUTH_LIMIT)
async def verify_reset_code(
    request: Request,
    data: VerifyResetCodeRequest,
    db: AsyncSession = Depends(get_db)
):
    token = await auth_service.verify_reset_code(db, data.email, data.code)
    return {"message": "Verification successful", "token": token, "token_type": "bearer"}


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(AUTH_LIMIT)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    await auth_service.reset_password(db, data.token, data.new_password)
    return {"message": "Password reset successful"}
