"""
Catalog Service - departments, courses and professors

Handles:
- CRUD with the catalog's uniqueness rules
- Deletion guards (departments with courses or sole-department professors, courses with reviews)
- Cascading a professor's deletion to their professor reviews
"""

from typing import List, Optional, Sequence

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictError,
    CourseNotFoundError,
    DepartmentNotFoundError,
    DependentRecordsError,
    ProfessorNotFoundError,
)
from app.core.logging_config import logger
from app.models.course import Course
from app.models.department import Department
from app.models.professor import Professor, professor_courses, professor_departments
from app.models.review import Review, ReviewType
from app.schemas.catalog import (
    CourseCreate,
    CourseUpdate,
    DepartmentCreate,
    DepartmentUpdate,
    ProfessorCreate,
    ProfessorUpdate,
)
from app.services.review_service import course_review_title


class CatalogService:
    """Admin-managed catalog"""

    # ==================== DEPARTMENTS ====================

    async def get_department(self, db: AsyncSession, department_id: str) -> Department:
        department = await db.get(Department, department_id)
        if department is None:
            raise DepartmentNotFoundError(department_id)
        return department

    async def list_departments(self, db: AsyncSession) -> Sequence[Department]:
        result = await db.execute(select(Department).order_by(Department.name))
        return result.scalars().all()

    async def _check_department_unique(
        self,
        db: AsyncSession,
        name: Optional[str],
        code: Optional[str],
        exclude_id: Optional[str] = None
    ) -> None:
        if code is not None:
            query = select(Department.id).where(Department.code == code)
            if exclude_id:
                query = query.where(Department.id != exclude_id)
            if (await db.execute(query)).first() is not None:
                raise ConflictError(f"Department code '{code}' already exists",
                                    code="DEPARTMENT_EXISTS", field="code")
        if name is not None:
            query = select(Department.id).where(func.lower(Department.name) == name.lower())
            if exclude_id:
                query = query.where(Department.id != exclude_id)
            if (await db.execute(query)).first() is not None:
                raise ConflictError(f"Department '{name}' already exists",
                                    code="DEPARTMENT_EXISTS", field="name")

    async def create_department(self, db: AsyncSession, data: DepartmentCreate) -> Department:
        await self._check_department_unique(db, data.name, data.code)
        department = Department(
            name=data.name.strip(),
            code=data.code,
            description=data.description or "",
            faculty=data.faculty.strip(),
        )
        db.add(department)
        await db.commit()
        logger.info(f"[Catalog] Created department {department.code}")
        return department

    async def update_department(self, db: AsyncSession, department_id: str, data: DepartmentUpdate) -> Department:
        department = await self.get_department(db, department_id)
        changes = data.model_dump(exclude_unset=True)
        await self._check_department_unique(db, changes.get("name"), changes.get("code"), exclude_id=department.id)

        code_changed = "code" in changes and changes["code"] != department.code
        for field, value in changes.items():
            if value is not None:
                setattr(department, field, value)

        if code_changed:
            await db.flush()
            await self._retitle_course_reviews(db, Review.department_id == department.id)

        await db.commit()
        return department

    async def delete_department(self, db: AsyncSession, department_id: str) -> None:
        """Blocked while courses belong to it or a professor would be left without a department"""
        department = await self.get_department(db, department_id)

        course_count = (await db.execute(
            select(func.count()).select_from(Course).where(Course.department_id == department.id)
        )).scalar() or 0
        if course_count:
            raise DependentRecordsError(
                f"Cannot delete department with {course_count} existing course(s)",
                code="DEPARTMENT_HAS_COURSES",
            )

        # Every professor keeps at least one department
        single_department = (
            select(professor_departments.c.professor_id)
            .group_by(professor_departments.c.professor_id)
            .having(func.count() == 1)
        )
        orphan_count = (await db.execute(
            select(func.count()).select_from(professor_departments).where(
                professor_departments.c.department_id == department.id,
                professor_departments.c.professor_id.in_(single_department),
            )
        )).scalar() or 0
        if orphan_count:
            raise DependentRecordsError(
                f"Cannot delete department: {orphan_count} professor(s) belong to no other department",
                code="DEPARTMENT_HAS_PROFESSORS",
            )

        await db.execute(
            delete(professor_departments).where(professor_departments.c.department_id == department.id)
        )
        await db.delete(department)
        await db.commit()
        logger.info(f"[Catalog] Deleted department {department.code}")

    # ==================== COURSES ====================

    async def get_course(self, db: AsyncSession, course_id: str) -> Course:
        course = await db.get(Course, course_id)
        if course is None:
            raise CourseNotFoundError(course_id)
        return course

    async def list_courses(self, db: AsyncSession, department_id: Optional[str] = None) -> Sequence[Course]:
        query = select(Course)
        if department_id:
            query = query.where(Course.department_id == department_id)
        result = await db.execute(query.order_by(Course.course_number))
        return result.scalars().all()

    async def _check_course_unique(
        self,
        db: AsyncSession,
        department_id: str,
        course_number: str,
        exclude_id: Optional[str] = None
    ) -> None:
        query = select(Course.id).where(
            Course.department_id == department_id,
            Course.course_number == course_number,
        )
        if exclude_id:
            query = query.where(Course.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError(
                f"Course {course_number} already exists in this department",
                code="COURSE_EXISTS",
                field="course_number",
            )

    async def create_course(self, db: AsyncSession, data: CourseCreate) -> Course:
        department = await self.get_department(db, data.department)
        await self._check_course_unique(db, department.id, data.course_number)

        course = Course(
            course_number=data.course_number,
            name=data.name.strip(),
            department=department,
            credit_hours=data.credit_hours,
            description=data.description or "",
            prerequisites=list(data.prerequisites),
            corequisites=list(data.corequisites),
            syllabus=data.syllabus or "",
        )
        db.add(course)
        await db.commit()
        logger.info(f"[Catalog] Created course {department.code} {course.course_number}")
        return course

    async def update_course(self, db: AsyncSession, course_id: str, data: CourseUpdate) -> Course:
        """Course reviews follow the course: department and title are refreshed"""
        course = await self.get_course(db, course_id)
        changes = data.model_dump(exclude_unset=True)

        department = course.department
        if changes.get("department"):
            department = await self.get_department(db, changes.pop("department"))
        else:
            changes.pop("department", None)

        department_changed = department.id != course.department_id
        course_number = changes.get("course_number") or course.course_number
        if department_changed or course_number != course.course_number:
            await self._check_course_unique(db, department.id, course_number, exclude_id=course.id)

        for field, value in changes.items():
            if value is not None:
                setattr(course, field, value)
        course.department = department
        await db.flush()

        if department_changed or {"course_number", "name"} & changes.keys():
            await self._retitle_course_reviews(db, Review.course_id == course.id)

        await db.commit()
        return course

    async def delete_course(self, db: AsyncSession, course_id: str) -> None:
        """Blocked while any course review references the course"""
        course = await self.get_course(db, course_id)

        review_count = (await db.execute(
            select(func.count()).select_from(Review).where(
                Review.course_id == course.id,
                Review.type == ReviewType.course,
            )
        )).scalar() or 0
        if review_count:
            raise DependentRecordsError(
                f"Cannot delete course with {review_count} existing review(s)",
                code="COURSE_HAS_REVIEWS",
            )

        await db.execute(delete(professor_courses).where(professor_courses.c.course_id == course.id))
        await db.delete(course)
        await db.commit()
        logger.info(f"[Catalog] Deleted course {course.course_number}")

    async def _retitle_course_reviews(self, db: AsyncSession, condition) -> None:
        """Regenerate titles (and department links) of course reviews after a catalog edit"""
        result = await db.execute(
            select(Review).where(condition, Review.type == ReviewType.course)
        )
        for review in result.scalars().all():
            course = await db.get(Course, review.course_id)
            if course is None:
                continue
            review.department = course.department
            review.title = course_review_title(course.department, course)

    # ==================== PROFESSORS ====================

    async def get_professor(self, db: AsyncSession, professor_id: str) -> Professor:
        professor = await db.get(Professor, professor_id)
        if professor is None:
            raise ProfessorNotFoundError(professor_id)
        return professor

    async def list_professors(self, db: AsyncSession, department_id: Optional[str] = None) -> Sequence[Professor]:
        query = select(Professor)
        if department_id:
            query = query.join(
                professor_departments,
                professor_departments.c.professor_id == Professor.id,
            ).where(professor_departments.c.department_id == department_id)
        result = await db.execute(query.order_by(Professor.name))
        return result.scalars().unique().all()

    async def _load_departments(self, db: AsyncSession, department_ids: List[str]) -> List[Department]:
        departments = []
        for department_id in dict.fromkeys(department_ids):
            departments.append(await self.get_department(db, department_id))
        return departments

    async def _load_courses(self, db: AsyncSession, course_ids: List[str]) -> List[Course]:
        courses = []
        for course_id in dict.fromkeys(course_ids):
            courses.append(await self.get_course(db, course_id))
        return courses

    async def _check_professor_unique(
        self,
        db: AsyncSession,
        name: str,
        departments: List[Department],
        email: Optional[str],
        exclude_id: Optional[str] = None
    ) -> None:
        """No two professors with the same name in one department; emails are unique"""
        query = (
            select(Professor.id)
            .join(professor_departments, professor_departments.c.professor_id == Professor.id)
            .where(
                func.lower(Professor.name) == name.lower(),
                professor_departments.c.department_id.in_([d.id for d in departments]),
            )
        )
        if exclude_id:
            query = query.where(Professor.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError(
                f"Professor '{name}' already exists in this department",
                code="PROFESSOR_EXISTS",
                field="name",
            )

        if email:
            query = select(Professor.id).where(func.lower(Professor.email) == email.lower())
            if exclude_id:
                query = query.where(Professor.id != exclude_id)
            if (await db.execute(query)).first() is not None:
                raise ConflictError("A professor with this email already exists",
                                    code="PROFESSOR_EXISTS", field="email")

    async def create_professor(self, db: AsyncSession, data: ProfessorCreate) -> Professor:
        departments = await self._load_departments(db, data.departments)
        courses = await self._load_courses(db, data.courses)
        await self._check_professor_unique(db, data.name, departments, data.email)

        professor = Professor(
            name=data.name,
            title=data.title or "Professor",
            email=data.email.lower() if data.email else None,
            bio=data.bio or "",
            office=data.office or "",
            office_hours=data.office_hours or "",
            profile_image=data.profile_image or "",
            avg_rating=0,
            departments=departments,
            courses=courses,
        )
        db.add(professor)
        await db.commit()
        logger.info(f"[Catalog] Created professor {professor.name}")
        return professor

    async def update_professor(self, db: AsyncSession, professor_id: str, data: ProfessorUpdate) -> Professor:
        professor = await self.get_professor(db, professor_id)
        changes = data.model_dump(exclude_unset=True)

        departments = professor.departments
        if changes.get("departments"):
            departments = await self._load_departments(db, changes["departments"])
        courses = None
        if changes.get("courses") is not None:
            courses = await self._load_courses(db, changes["courses"])

        name = changes.get("name") or professor.name
        email = changes.get("email") if "email" in changes else professor.email
        await self._check_professor_unique(db, name, departments, email, exclude_id=professor.id)

        for field in ("name", "title", "bio", "office", "office_hours", "profile_image"):
            if changes.get(field) is not None:
                setattr(professor, field, changes[field])
        if "email" in changes:
            professor.email = email.lower() if email else None
        professor.departments = list(departments)
        if courses is not None:
            professor.courses = courses

        await db.commit()
        return professor

    async def delete_professor(self, db: AsyncSession, professor_id: str) -> int:
        """Delete the professor and their professor reviews; returns the number of reviews removed"""
        professor = await self.get_professor(db, professor_id)

        result = await db.execute(
            select(Review).where(Review.professor_id == professor.id)
        )
        reviews = result.scalars().all()
        for review in reviews:
            await db.delete(review)

        await db.delete(professor)
        await db.commit()
        logger.info(f"[Catalog] Deleted professor {professor.name} and {len(reviews)} review(s)")
        return len(reviews)


catalog_service = CatalogService()
