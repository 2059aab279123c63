from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class UserRole(str, enum.Enum):
    """User roles"""
    student = "student"
    admin = "admin"


class UserStatus(str, enum.Enum):
    """Account status; only active accounts pass authentication"""
    active = "active"
    suspended = "suspended"
    banned = "banned"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    role = Column(SQLEnum(UserRole), default=UserRole.student, nullable=False)
    status = Column(SQLEnum(UserStatus), default=UserStatus.active, nullable=False)
    is_verified = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.active

    def __repr__(self):
        return f"<User {self.username}>"
