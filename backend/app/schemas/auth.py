from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.user import UserRole, UserStatus

USERNAME_PATTERN = r'^[A-Za-z0-9_.-]+$'


class SendVerificationCodeRequest(BaseModel):
    """First step of signup: the account waits until the emailed code is confirmed"""
    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    recaptcha_token: Optional[str] = None

    @field_validator('name', 'username')
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


class VerifyCodeRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class VerifyResetCodeRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12)


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=6, max_length=128)


class UserResponse(BaseModel):
    id: str
    name: str
    username: str
    email: str
    role: UserRole
    status: UserStatus
    is_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"


class LoginResponse(TokenResponse):
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
