"""
Auth Service - signup verification, login and password reset

Handles:
- Two-step signup (emailed code, then account creation)
- Credential checks and access-token issuance
- Password reset by emailed code and short-lived reset token
- Profile edits that touch the denormalized username
"""

import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import select, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    AccountInactiveError,
    ConflictError,
    EmailDeliveryError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenUserNotFoundError,
    VerificationCodeError,
)
from app.core.logging_config import logger
from app.core.security import (
    create_access_token,
    create_reset_token,
    decode_token,
    generate_verification_code,
    get_password_hash,
    verify_password,
    TOKEN_PURPOSE_PASSWORD_RESET,
)
from app.core.types import utcnow
from app.models.pending_verification import VerificationPurpose
from app.models.review import Review, ReviewReport, ReviewVote
from app.models.user import User
from app.schemas.auth import SendVerificationCodeRequest, ProfileUpdate
from app.services.email_service import email_service
from app.services.verification_store import verification_store

RESET_REQUEST_MESSAGE = "If this email exists, a reset code has been sent"


class AuthService:
    """Account lifecycle operations"""

    def __init__(self, store=verification_store, mailer=email_service):
        self.store = store
        self.mailer = mailer

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    # ==================== SIGNUP ====================

    async def send_signup_code(self, db: AsyncSession, data: SendVerificationCodeRequest) -> None:
        """
        Store the pending account and email a verification code.

        Email delivery failures propagate (EMAIL_DELIVERY_FAILED); the pending
        record is rolled back with the request.
        """
        email = data.email.lower()
        result = await db.execute(
            select(User.id).where(or_(User.email == email, User.username == data.username))
        )
        if result.first() is not None:
            logger.log_auth_event(
                event="signup",
                success=False,
                user_email=email,
                reason="Email or username already registered"
            )
            raise ConflictError("Email or username already registered", code="EMAIL_OR_USERNAME_EXISTS")

        code = generate_verification_code()
        await self.store.put(
            db,
            email,
            VerificationPurpose.signup,
            code,
            ttl_minutes=settings.VERIFICATION_CODE_TTL_MINUTES,
            payload={
                "name": data.name,
                "username": data.username,
                "hashed_password": get_password_hash(data.password),
            },
        )
        await self.mailer.send_verification_code(email, code)
        await db.commit()

        logger.log_auth_event(event="signup_code_sent", success=True, user_email=email)

    async def confirm_signup(self, db: AsyncSession, email: str, code: str) -> Tuple[User, str]:
        """Create the account if ``code`` matches a live signup record; returns (user, token)"""
        email = email.lower()
        record = await self.store.get(db, email, VerificationPurpose.signup)

        if (
            record is None
            or record.is_expired(utcnow())
            or not secrets.compare_digest(record.code, code.strip())
        ):
            logger.log_auth_event(event="verify_code", success=False, user_email=email,
                                  reason="Invalid or expired verification code")
            raise VerificationCodeError("Invalid or expired verification code")

        payload = record.payload or {}
        # Email or username may have been taken since the code was sent
        result = await db.execute(
            select(User.id).where(or_(User.email == email, User.username == payload.get("username")))
        )
        if result.first() is not None:
            raise ConflictError("Email or username already registered", code="EMAIL_OR_USERNAME_EXISTS")

        user = User(
            name=payload["name"],
            username=payload["username"],
            email=email,
            hashed_password=payload["hashed_password"],
            is_verified=True,
        )
        db.add(user)
        await db.delete(record)
        await db.commit()

        token = create_access_token(
            {"sub": str(user.id), "username": user.username},
            expires_delta=timedelta(minutes=settings.SIGNUP_TOKEN_EXPIRE_MINUTES),
        )
        logger.log_auth_event(event="signup", success=True, user_email=email, user_id=str(user.id))
        return user, token

    # ==================== LOGIN ====================

    async def login(self, db: AsyncSession, email: str, password: str, client_ip: str = "unknown") -> Tuple[User, str]:
        """Check credentials; returns (user, access token)"""
        user = await self.get_user_by_email(db, email)

        if user is None or not verify_password(password, user.hashed_password):
            logger.log_auth_event(
                event="login",
                success=False,
                user_email=email,
                reason="Invalid credentials",
                client_ip=client_ip
            )
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.log_auth_event(event="login", success=False, user_email=user.email,
                                  reason=f"Account {user.status.value}", client_ip=client_ip)
            raise AccountInactiveError(user.status.value)

        token = create_access_token({"sub": str(user.id), "username": user.username})
        logger.log_auth_event(event="login", success=True, user_email=user.email,
                              user_id=str(user.id), client_ip=client_ip)
        return user, token

    # ==================== PASSWORD RESET ====================

    async def request_password_reset(self, db: AsyncSession, email: str) -> None:
        """
        Email a reset code if the account exists.

        Never reveals whether the email is registered: unknown addresses and
        delivery failures look the same to the caller.
        """
        email = email.lower()
        user = await self.get_user_by_email(db, email)
        if user is None:
            logger.log_auth_event(event="password_reset_request", success=False,
                                  user_email=email, reason="Unknown email")
            return

        code = generate_verification_code()
        await self.store.put(
            db,
            email,
            VerificationPurpose.password_reset,
            code,
            ttl_minutes=settings.PASSWORD_RESET_CODE_TTL_MINUTES,
            payload={"user_id": str(user.id)},
        )
        try:
            await self.mailer.send_password_reset_code(email, code)
        except EmailDeliveryError as e:
            await db.rollback()
            logger.log_auth_event(event="password_reset_request", success=False,
                                  user_email=email, reason=str(e))
            return

        await db.commit()
        logger.log_auth_event(event="password_reset_request", success=True, user_email=email)

    async def verify_reset_code(self, db: AsyncSession, email: str, code: str) -> str:
        """Exchange a valid reset code for a short-lived reset token"""
        email = email.lower()
        record = await self.store.get(db, email, VerificationPurpose.password_reset)

        if record is None:
            raise VerificationCodeError(
                "No password reset request found. Please request a new code.",
                code="NO_REQUEST_FOUND",
            )

        if record.is_expired(utcnow()):
            await self.store.discard(db, email, VerificationPurpose.password_reset)
            await db.commit()
            raise VerificationCodeError(
                "Verification code has expired. Please request a new one.",
                code="EXPIRED_CODE",
            )

        if not secrets.compare_digest(record.code, code.strip()):
            logger.log_auth_event(event="verify_reset_code", success=False,
                                  user_email=email, reason="Invalid code")
            raise VerificationCodeError(
                "Invalid verification code. Please check the code and try again.",
                code="INVALID_CODE",
            )

        logger.log_auth_event(event="verify_reset_code", success=True, user_email=email)
        return create_reset_token(record.payload["user_id"])

    async def reset_password(self, db: AsyncSession, token: str, new_password: str) -> User:
        payload = decode_token(token)
        if payload.get("purpose") != TOKEN_PURPOSE_PASSWORD_RESET:
            raise InvalidTokenError()

        user = await db.get(User, str(payload.get("sub")))
        if user is None:
            raise TokenUserNotFoundError()

        # The code is single-use: no live reset record means it was already consumed
        record = await self.store.get(db, user.email, VerificationPurpose.password_reset)
        if record is None:
            raise InvalidTokenError("Reset token has already been used")

        user.hashed_password = get_password_hash(new_password)
        await db.delete(record)
        await db.commit()

        logger.log_auth_event(event="password_reset", success=True, user_email=user.email,
                              user_id=str(user.id))
        return user

    # ==================== PROFILE ====================

    async def update_profile(self, db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        """
        Update name and/or username.

        A new username is carried over to the user's reviews, votes and reports,
        which store it denormalized.
        """
        old_username = user.username

        if data.username and data.username != old_username:
            result = await db.execute(select(User.id).where(User.username == data.username))
            if result.first() is not None:
                raise ConflictError("Username already taken", code="USERNAME_EXISTS", field="username")

            new_username = data.username
            user.username = new_username
            await db.execute(
                update(Review).where(Review.user_id == user.id).values(username=new_username)
            )
            await db.execute(
                update(Review)
                .where(Review.user_id == user.id, Review.is_anonymous.is_(False))
                .values(display_name=new_username)
            )
            await db.execute(
                update(ReviewVote).where(ReviewVote.username == old_username).values(username=new_username)
            )
            await db.execute(
                update(ReviewReport).where(ReviewReport.reporter == old_username).values(reporter=new_username)
            )

        if data.name:
            user.name = data.name.strip()

        await db.commit()
        logger.info(f"[Users] Profile updated for {user.username}")
        return user


auth_service = AuthService()
