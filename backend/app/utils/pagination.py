"""
Pagination Utility Module

Provides standardized pagination helpers for the list endpoints.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class PaginationMeta(BaseModel):
    """Pagination block returned next to the items"""
    total: int
    page: int
    limit: int
    pages: int


def build_meta(total: int, page: int, limit: int) -> Dict[str, int]:
    pages = (total + limit - 1) // limit if total > 0 else 1
    return {"total": total, "page": page, "limit": limit, "pages": pages}


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    count_query: Optional[Select] = None
) -> Dict[str, Any]:
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        db: Database session
        query: Base SQLAlchemy query (ordering included)
        page: Page number (1-indexed)
        limit: Items per page, capped at MAX_PAGE_SIZE
        count_query: Optional custom count query

    Returns:
        Dictionary with ``items`` and a ``pagination`` block
    """
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))

    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    items = result.scalars().all()

    return {
        "items": items,
        "pagination": build_meta(total, page, limit),
    }
