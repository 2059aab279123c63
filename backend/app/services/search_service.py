"""
Search Service - catalog lookup and type-ahead suggestions

Queries are normalized (trimmed, upper-cased) before matching. A query that
looks like a course code ("CS 101", "CS101") is resolved against the
department code first; everything else falls back through bare department
code, course number prefix and finally free text.
"""

import re
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import QueryRequiredError
from app.models.course import Course
from app.models.department import Department
from app.models.professor import Professor

COURSE_CODE_RE = re.compile(r'^([A-Z]+)\s*(\d[A-Z0-9]*)$')

# Rank buckets for suggestions
RANK_EXACT = 0
RANK_PREFIX = 1
RANK_SUBSTRING = 2

SUGGESTION_CANDIDATES = 50


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().upper()


def match_rank(term: str, *values: Optional[str]) -> Optional[int]:
    """Best rank of ``term`` against any of ``values``; None when nothing matches"""
    best = None
    for value in values:
        if not value:
            continue
        value = value.upper()
        if value == term:
            rank = RANK_EXACT
        elif value.startswith(term):
            rank = RANK_PREFIX
        elif term in value:
            rank = RANK_SUBSTRING
        else:
            continue
        if best is None or rank < best:
            best = rank
    return best


class SearchService:
    """Structured and free-text catalog search"""

    async def _department_by_code(self, db: AsyncSession, code: str) -> Optional[Department]:
        result = await db.execute(select(Department).where(Department.code == code))
        return result.scalar_one_or_none()

    async def _courses_in(self, db: AsyncSession, department: Department, number_prefix: str = "") -> Sequence[Course]:
        query = select(Course).where(Course.department_id == department.id)
        if number_prefix:
            query = query.where(Course.course_number.startswith(number_prefix, autoescape=True))
        result = await db.execute(query.order_by(Course.course_number))
        return result.scalars().all()

    async def search(self, db: AsyncSession, query: Optional[str]) -> Dict[str, list]:
        """
        Returns ``{"departments", "courses", "professors"}``.

        Raises QueryRequiredError on an empty query.
        """
        term = normalize_query(query)
        if not term:
            raise QueryRequiredError()

        result = await db.execute(
            select(Department)
            .where(or_(
                Department.code == term,
                Department.name.icontains(term, autoescape=True),
            ))
            .order_by(Department.name)
        )
        departments: List[Department] = list(result.scalars().all())
        courses: List[Course] = []
        professors: List[Professor] = []

        def include(department: Department) -> None:
            if all(d.id != department.id for d in departments):
                departments.append(department)

        match = COURSE_CODE_RE.match(term)
        if match:
            department = await self._department_by_code(db, match.group(1))
            if department is not None:
                include(department)
                courses = list(await self._courses_in(db, department, match.group(2)))
                return {"departments": departments, "courses": courses, "professors": professors}

        # Bare department code
        department = await self._department_by_code(db, term)
        if department is not None:
            include(department)
            courses = list(await self._courses_in(db, department))
            return {"departments": departments, "courses": courses, "professors": professors}

        # Bare course number prefix
        number = re.sub(r'\s+', '', term)
        result = await db.execute(
            select(Course)
            .where(Course.course_number.startswith(number, autoescape=True))
            .order_by(Course.course_number)
        )
        courses = list(result.scalars().all())
        if courses:
            return {"departments": departments, "courses": courses, "professors": professors}

        # Free text
        result = await db.execute(
            select(Course)
            .where(Course.name.icontains(term, autoescape=True))
            .order_by(Course.course_number)
        )
        courses = list(result.scalars().all())
        result = await db.execute(
            select(Professor)
            .where(or_(
                Professor.name.icontains(term, autoescape=True),
                Professor.title.icontains(term, autoescape=True),
            ))
            .order_by(Professor.name)
        )
        professors = list(result.scalars().all())

        return {"departments": departments, "courses": courses, "professors": professors}

    async def suggestions(self, db: AsyncSession, query: Optional[str]) -> List[dict]:
        """
        Ranked type-ahead entries: exact, then prefix, then substring matches.

        Capped per entity type and deduplicated; an empty query yields [].
        """
        term = normalize_query(query)
        if not term:
            return []

        ranked = []

        result = await db.execute(
            select(Department)
            .where(or_(
                Department.code.icontains(term, autoescape=True),
                Department.name.icontains(term, autoescape=True),
            ))
            .limit(SUGGESTION_CANDIDATES)
        )
        ranked.extend(self._rank(
            result.scalars().all(),
            settings.SUGGESTIONS_MAX_DEPARTMENTS,
            lambda d: match_rank(term, d.code, d.name),
            lambda d: {
                "id": str(d.id),
                "display_text": d.code,
                "subtext": d.name,
                "entity_type": "department",
            },
        ))

        compact = re.sub(r'\s+', '', term)
        result = await db.execute(
            select(Course)
            .join(Department, Course.department_id == Department.id)
            .where(or_(
                Course.name.icontains(term, autoescape=True),
                Course.course_number.icontains(compact, autoescape=True),
                (Department.code + Course.course_number).icontains(compact, autoescape=True),
            ))
            .limit(SUGGESTION_CANDIDATES)
        )
        ranked.extend(self._rank(
            result.scalars().all(),
            settings.SUGGESTIONS_MAX_COURSES,
            lambda c: match_rank(
                term, c.display_code, c.name, c.course_number, f"{c.department.code}{c.course_number}"
            ),
            lambda c: {
                "id": str(c.id),
                "display_text": c.display_code,
                "subtext": c.name,
                "entity_type": "course",
            },
        ))

        result = await db.execute(
            select(Professor)
            .where(or_(
                Professor.name.icontains(term, autoescape=True),
                Professor.title.icontains(term, autoescape=True),
            ))
            .limit(SUGGESTION_CANDIDATES)
        )
        ranked.extend(self._rank(
            result.scalars().all(),
            settings.SUGGESTIONS_MAX_PROFESSORS,
            lambda p: match_rank(term, p.name, p.title),
            lambda p: {
                "id": str(p.id),
                "display_text": p.name,
                "subtext": ", ".join([p.title] + [d.code for d in p.departments]),
                "entity_type": "professor",
            },
        ))

        # Stable: within a rank, departments come before courses before professors
        ranked.sort(key=lambda item: item[0])
        return [entry for _, entry in ranked]

    def _rank(self, rows, cap, rank_of, to_entry) -> list:
        seen = set()
        scored = []
        for row in rows:
            if row.id in seen:
                continue
            seen.add(row.id)
            rank = rank_of(row)
            if rank is None:
                continue
            scored.append((rank, to_entry(row)))
        scored.sort(key=lambda item: (item[0], item[1]["display_text"]))
        return scored[:cap]


search_service = SearchService()
