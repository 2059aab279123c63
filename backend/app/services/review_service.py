"""
Review Service - moderation state machine for reviews

Handles:
- Create / edit (including course <-> professor conversion) / delete
- Admin moderation: approve, reject, clear reports
- Reports and votes
- Listing queries for the public, authors and admins

Every change that can move a professor review in or out of the approved set
recomputes that professor's rating before the transaction commits.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    AlreadyReportedError,
    CourseDepartmentMismatchError,
    CourseNotFoundError,
    DepartmentNotFoundError,
    InappropriateContentError,
    NotReviewOwnerError,
    ProfessorNotFoundError,
    ReviewNotFoundError,
)
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.course import Course
from app.models.department import Department
from app.models.professor import Professor
from app.models.review import (
    Review,
    ReviewReport,
    ReviewStatus,
    ReviewType,
    VoteDirection,
    ANONYMOUS_DISPLAY_NAME,
)
from app.models.user import User
from app.schemas.review import CourseReviewInput, ProfessorReviewInput
from app.services.content_filter import ContentPolicy, build_content_policy
from app.services.rating_aggregator import RatingAggregator, rating_aggregator
from app.services.vote_ledger import VoteLedger, vote_ledger
from app.utils.pagination import paginate, DEFAULT_PAGE_SIZE


@dataclass
class ReviewTarget:
    """Resolved references for one review variant"""
    type: ReviewType
    title: str
    course: Optional[Course] = None
    department: Optional[Department] = None
    professor: Optional[Professor] = None


def course_review_title(department: Department, course: Course) -> str:
    return f"{department.code} {course.course_number}: {course.name}"


class ReviewService:
    """Moderation state machine and review queries"""

    def __init__(
        self,
        aggregator: RatingAggregator = rating_aggregator,
        ledger: VoteLedger = vote_ledger,
        content_policy: Optional[ContentPolicy] = None,
    ):
        self.aggregator = aggregator
        self.ledger = ledger
        self._content_policy = content_policy

    @property
    def content_policy(self) -> ContentPolicy:
        if self._content_policy is None:
            self._content_policy = build_content_policy()
        return self._content_policy

    # ==================== LOOKUPS ====================

    async def get_review(self, db: AsyncSession, review_id: str) -> Review:
        """Load a review with its references, votes and reports"""
        result = await db.execute(
            select(Review)
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        review = result.scalar_one_or_none()
        if review is None:
            raise ReviewNotFoundError(review_id)
        return review

    def can_view(self, review: Review, viewer: Optional[User]) -> bool:
        """Approved reviews are public; others only to their author and admins"""
        if review.status == ReviewStatus.approved:
            return True
        if viewer is None:
            return False
        return viewer.is_admin or viewer.id == review.user_id

    def is_owner(self, review: Review, user: User) -> bool:
        return user.id == review.user_id

    def _ensure_owner(self, review: Review, user: User, claimed_username: Optional[str] = None) -> None:
        if not self.is_owner(review, user):
            raise NotReviewOwnerError()
        if claimed_username is not None and claimed_username != review.username:
            raise NotReviewOwnerError()

    # ==================== VARIANTS ====================

    async def resolve_target(self, db: AsyncSession, payload) -> ReviewTarget:
        """Check the referenced entities exist and build the variant's references and title"""
        if isinstance(payload, CourseReviewInput):
            department = await db.get(Department, payload.department)
            if department is None:
                raise DepartmentNotFoundError(payload.department)
            course = await db.get(Course, payload.course)
            if course is None:
                raise CourseNotFoundError(payload.course)
            if course.department_id != department.id:
                raise CourseDepartmentMismatchError()
            return ReviewTarget(
                type=ReviewType.course,
                title=course_review_title(department, course),
                course=course,
                department=department,
            )

        if isinstance(payload, ProfessorReviewInput):
            professor = await db.get(Professor, payload.professor)
            if professor is None:
                raise ProfessorNotFoundError(payload.professor)
            title = (payload.title or "").strip() or professor.name
            return ReviewTarget(type=ReviewType.professor, title=title, professor=professor)

        raise ValueError(f"Unsupported review payload: {type(payload).__name__}")

    def convert(self, review: Review, target: ReviewTarget) -> None:
        """
        Point ``review`` at ``target``'s variant.

        References that belong to the other variant are cleared, so a course
        review turned professor review keeps no course or department.
        """
        review.type = target.type
        if target.type == ReviewType.course:
            review.professor = None
            review.course = target.course
            review.department = target.department
        else:
            review.course = None
            review.department = None
            review.professor = target.professor
        review.title = target.title

    def _check_content(self, *texts: str) -> None:
        violations = self.content_policy.find_violations(" ".join(t for t in texts if t))
        if violations:
            logger.warning(
                "[Reviews] Rejected review with inappropriate content",
                extra={"event_type": "content_rejected", "violation_count": len(violations)}
            )
            raise InappropriateContentError()

    def _check_submitted_content(self, payload) -> None:
        """Only text the author wrote; course titles come from the catalog"""
        if isinstance(payload, ProfessorReviewInput):
            self._check_content(payload.title, payload.review_text)
        else:
            self._check_content(payload.review_text)

    # ==================== STATE MACHINE ====================

    async def create_review(self, db: AsyncSession, payload, author: User) -> Review:
        target = await self.resolve_target(db, payload)
        self._check_submitted_content(payload)

        review = Review(
            rating=payload.rating,
            review_text=payload.review_text,
            user_id=author.id,
            username=author.username,
            is_anonymous=payload.is_anonymous,
            display_name=ANONYMOUS_DISPLAY_NAME if payload.is_anonymous else author.username,
            status=ReviewStatus(settings.REVIEW_DEFAULT_STATUS),
            report_count=0,
            votes=[],
            reports=[],
        )
        self.convert(review, target)
        db.add(review)
        await db.flush()

        if review.type == ReviewType.professor:
            await self.aggregator.recompute_professor_rating(db, review.professor_id)

        await db.commit()
        logger.log_moderation_event("created", str(review.id), actor=author.username,
                                    review_type=review.type.value, status=review.status.value)
        return await self.get_review(db, review.id)

    async def update_review(self, db: AsyncSession, review_id: str, payload, actor: User) -> Review:
        """Author-only edit; may switch the review between course and professor"""
        review = await self.get_review(db, review_id)
        self._ensure_owner(review, actor, payload.username)

        old_professor_id = review.professor_id
        old_type = review.type

        target = await self.resolve_target(db, payload)
        self._check_submitted_content(payload)

        self.convert(review, target)
        review.rating = payload.rating
        review.review_text = payload.review_text
        review.is_anonymous = payload.is_anonymous
        review.display_name = ANONYMOUS_DISPLAY_NAME if payload.is_anonymous else review.username
        review.updated_at = utcnow()
        await db.flush()

        await self.aggregator.recompute_many(db, [old_professor_id, review.professor_id])

        await db.commit()
        logger.log_moderation_event(
            "edited" if old_type == review.type else f"converted to {review.type.value}",
            str(review.id),
            actor=actor.username,
        )
        return await self.get_review(db, review.id)

    async def delete_review(
        self,
        db: AsyncSession,
        review_id: str,
        actor: User,
        claimed_username: Optional[str] = None
    ) -> None:
        """Author or admin"""
        review = await self.get_review(db, review_id)
        if not actor.is_admin:
            self._ensure_owner(review, actor, claimed_username)

        professor_id = review.professor_id if review.type == ReviewType.professor else None
        await db.delete(review)
        await db.flush()

        if professor_id:
            await self.aggregator.recompute_professor_rating(db, professor_id)

        await db.commit()
        logger.log_moderation_event("deleted", str(review_id), actor=actor.username)

    async def set_status(self, db: AsyncSession, review_id: str, status: ReviewStatus, admin: User) -> Review:
        """
        Move a review to ``status``.

        Re-applying the current status changes nothing. A real transition of a
        professor review recomputes the professor's rating.
        """
        review = await self.get_review(db, review_id)
        if review.status == status:
            return review

        previous = review.status
        review.status = status
        review.updated_at = utcnow()
        await db.flush()

        if review.type == ReviewType.professor:
            await self.aggregator.recompute_professor_rating(db, review.professor_id)

        await db.commit()
        logger.log_moderation_event(status.value, str(review.id), actor=admin.username,
                                    previous_status=previous.value)
        return await self.get_review(db, review.id)

    async def approve(self, db: AsyncSession, review_id: str, admin: User) -> Review:
        return await self.set_status(db, review_id, ReviewStatus.approved, admin)

    async def reject(self, db: AsyncSession, review_id: str, admin: User) -> Review:
        return await self.set_status(db, review_id, ReviewStatus.rejected, admin)

    async def report_review(
        self,
        db: AsyncSession,
        review_id: str,
        reporter: User,
        reason: str,
        details: Optional[str] = None
    ) -> Review:
        """One report per username per review"""
        review = await self.get_review(db, review_id)
        if not self.can_view(review, reporter):
            raise ReviewNotFoundError(review_id)
        if any(r.reporter == reporter.username for r in review.reports):
            raise AlreadyReportedError()

        review.reports.append(ReviewReport(reporter=reporter.username, reason=reason, details=details))
        review.report_count = len(review.reports)
        await db.commit()

        logger.log_moderation_event("reported", str(review.id), actor=reporter.username,
                                    report_count=review.report_count)
        return await self.get_review(db, review.id)

    async def clear_reports(self, db: AsyncSession, review_id: str, admin: User) -> Review:
        review = await self.get_review(db, review_id)
        review.reports.clear()
        review.report_count = 0
        await db.commit()

        logger.log_moderation_event("reports cleared", str(review.id), actor=admin.username)
        return await self.get_review(db, review.id)

    async def vote(self, db: AsyncSession, review_id: str, voter: User, direction: VoteDirection) -> Review:
        review = await self.get_review(db, review_id)
        if not self.can_view(review, voter):
            raise ReviewNotFoundError(review_id)
        self.ledger.cast(review, voter.username, direction)
        await db.commit()
        return await self.get_review(db, review.id)

    # ==================== LISTINGS ====================

    async def list_reviews(
        self,
        db: AsyncSession,
        *,
        status: Optional[ReviewStatus] = ReviewStatus.approved,
        review_type: Optional[ReviewType] = None,
        course_id: Optional[str] = None,
        department_id: Optional[str] = None,
        professor_id: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        """Newest first; public callers always pass ``status=approved``"""
        query = select(Review)
        if status is not None:
            query = query.where(Review.status == status)
        if review_type is not None:
            query = query.where(Review.type == review_type)
        if course_id:
            query = query.where(Review.course_id == course_id)
        if department_id:
            query = query.where(Review.department_id == department_id)
        if professor_id:
            query = query.where(Review.professor_id == professor_id, Review.type == ReviewType.professor)
        query = query.order_by(Review.created_at.desc())
        return await paginate(db, query, page, limit)

    async def list_user_reviews(self, db: AsyncSession, user: User) -> list:
        """All of a user's reviews regardless of status"""
        result = await db.execute(
            select(Review).where(Review.user_id == user.id).order_by(Review.created_at.desc())
        )
        return result.scalars().all()

    async def list_reported(self, db: AsyncSession, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
        query = (
            select(Review)
            .where(Review.report_count > 0)
            .order_by(Review.report_count.desc(), Review.created_at.desc())
        )
        return await paginate(db, query, page, limit)

    async def admin_list(
        self,
        db: AsyncSession,
        status: Optional[ReviewStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        query = select(Review)
        if status is not None:
            query = query.where(Review.status == status)
        if search:
            query = query.where(or_(
                Review.title.icontains(search, autoescape=True),
                Review.review_text.icontains(search, autoescape=True),
                Review.username.icontains(search, autoescape=True),
            ))
        query = query.order_by(Review.created_at.desc())
        return await paginate(db, query, page, limit)

    async def count_by_status(self, db: AsyncSession) -> Dict[str, int]:
        result = await db.execute(select(Review.status, func.count()).group_by(Review.status))
        counts = {s.value: 0 for s in ReviewStatus}
        for status, count in result.all():
            counts[status.value] = count
        return counts


review_service = ReviewService()
