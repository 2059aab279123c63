from sqlalchemy import Column, String, DateTime, JSON, Enum as SQLEnum, UniqueConstraint
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class VerificationPurpose(str, enum.Enum):
    signup = "signup"
    password_reset = "password_reset"


class PendingVerification(Base):
    """
    Emailed 6-digit code waiting to be confirmed.

    ``payload`` holds what the confirmation needs afterwards: the pending
    account (name, username, hashed password) for signups, the user id for
    password resets. One live record per (email, purpose); a new request
    replaces the old one.
    """
    __tablename__ = "pending_verifications"
    __table_args__ = (
        UniqueConstraint("email", "purpose", name="uq_pending_verifications_email_purpose"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), nullable=False, index=True)
    purpose = Column(SQLEnum(VerificationPurpose), nullable=False)
    code = Column(String(6), nullable=False)
    payload = Column(JSON, default=dict)
    expires_at = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def is_expired(self, now) -> bool:
        return now > self.expires_at

    def __repr__(self):
        return f"<PendingVerification {self.email} {self.purpose}>"
