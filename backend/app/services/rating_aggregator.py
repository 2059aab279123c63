"""
Rating Aggregator

Recomputes ``Professor.avg_rating`` from scratch: the mean rating of the
professor's approved professor-type reviews, rounded half-up to one decimal,
or 0 when there are none. It never applies deltas, so calling it more often
than needed is harmless.

Runs inside the caller's transaction (flush + update, no commit).
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging_config import logger
from app.models.professor import Professor
from app.models.review import Review, ReviewStatus, ReviewType


def average_rating(ratings: Sequence[int]) -> float:
    """Mean rounded half-up to one decimal; 0.0 for no ratings"""
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class RatingAggregator:
    """Keeps professor averages in line with the approved review set"""

    async def recompute_professor_rating(
        self,
        db: AsyncSession,
        professor_id: Optional[str]
    ) -> Optional[float]:
        """
        Recompute one professor's ``avg_rating``.

        Returns the new value, or None when the professor does not exist
        (logged and skipped).
        """
        if not professor_id:
            return None

        # Pending changes (new review, status change) must be visible to the query
        await db.flush()

        professor = await db.get(Professor, professor_id)
        if professor is None:
            logger.warning(
                f"[Ratings] Professor {professor_id} not found, skipping recompute",
                extra={"event_type": "rating_recompute_skipped", "professor_id": professor_id}
            )
            return None

        result = await db.execute(
            select(Review.rating).where(
                Review.professor_id == professor_id,
                Review.type == ReviewType.professor,
                Review.status == ReviewStatus.approved,
            )
        )
        ratings = [r for r in result.scalars().all() if r is not None]

        new_rating = average_rating(ratings)
        if professor.avg_rating != new_rating:
            logger.debug(
                f"[Ratings] {professor.name}: {professor.avg_rating} -> {new_rating} ({len(ratings)} reviews)"
            )
        professor.avg_rating = new_rating
        await db.flush()
        return new_rating

    async def recompute_many(self, db: AsyncSession, professor_ids: Iterable[Optional[str]]) -> None:
        """Recompute each distinct, non-empty id once"""
        seen = set()
        for professor_id in professor_ids:
            if professor_id and professor_id not in seen:
                seen.add(professor_id)
                await self.recompute_professor_rating(db, professor_id)

    async def recompute_all(self, db: AsyncSession) -> int:
        """Recompute every professor; returns how many were processed"""
        result = await db.execute(select(Professor.id))
        professor_ids = result.scalars().all()
        for professor_id in professor_ids:
            await self.recompute_professor_rating(db, professor_id)
        return len(professor_ids)


rating_aggregator = RatingAggregator()
