"""
Review models

A review is either about a course (``course`` + ``department`` set) or about a
professor (``professor`` set). Votes and reports live in their own tables,
one row per username, and are removed together with the review.
"""
from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text, ForeignKey,
    Enum as SQLEnum, UniqueConstraint, Index,
)
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow

ANONYMOUS_DISPLAY_NAME = "Anonymous"


class ReviewType(str, enum.Enum):
    course = "course"
    professor = "professor"


class ReviewStatus(str, enum.Enum):
    """Moderation state"""
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class VoteDirection(str, enum.Enum):
    up = "up"
    down = "down"


class Review(Base):
    """Review model"""
    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_professor_status", "professor_id", "type", "status"),
        Index("ix_reviews_report_count", "report_count"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    type = Column(SQLEnum(ReviewType), nullable=False, index=True)

    # Course variant
    course_id = Column(GUID, ForeignKey("courses.id"), nullable=True, index=True)
    department_id = Column(GUID, ForeignKey("departments.id"), nullable=True, index=True)
    # Professor variant
    professor_id = Column(GUID, ForeignKey("professors.id"), nullable=True)

    title = Column(String(500), nullable=False)
    rating = Column(Integer, nullable=False)  # 1..5
    review_text = Column(Text, nullable=False)

    # Author
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    username = Column(String(100), nullable=False)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    display_name = Column(String(100), nullable=False)

    status = Column(SQLEnum(ReviewStatus), default=ReviewStatus.pending, nullable=False, index=True)
    report_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    course = relationship("Course", lazy="selectin")
    department = relationship("Department", lazy="selectin")
    professor = relationship("Professor", lazy="selectin")
    votes = relationship(
        "ReviewVote", back_populates="review", lazy="selectin",
        cascade="all, delete-orphan",
    )
    reports = relationship(
        "ReviewReport", back_populates="review", lazy="selectin",
        cascade="all, delete-orphan", order_by="ReviewReport.created_at",
    )

    @property
    def upvoters(self):
        return {v.username for v in self.votes if v.direction == VoteDirection.up}

    @property
    def downvoters(self):
        return {v.username for v in self.votes if v.direction == VoteDirection.down}

    @property
    def upvotes(self) -> int:
        return len(self.upvoters)

    @property
    def downvotes(self) -> int:
        return len(self.downvoters)

    def __repr__(self):
        return f"<Review {self.id} {self.type.value if self.type else ''}>"


class ReviewVote(Base):
    """One vote per (review, username)"""
    __tablename__ = "review_votes"
    __table_args__ = (
        UniqueConstraint("review_id", "username", name="uq_review_votes_review_username"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    review_id = Column(GUID, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    username = Column(String(100), nullable=False)
    direction = Column(SQLEnum(VoteDirection), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    review = relationship("Review", back_populates="votes")


class ReviewReport(Base):
    """One report per (review, reporter)"""
    __tablename__ = "review_reports"
    __table_args__ = (
        UniqueConstraint("review_id", "reporter", name="uq_review_reports_review_reporter"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    review_id = Column(GUID, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    reporter = Column(String(100), nullable=False)  # username
    reason = Column(String(255), nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    review = relationship("Review", back_populates="reports")
