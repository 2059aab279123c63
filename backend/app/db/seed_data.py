"""
Database Seed Data Module

Seeds the admin account and a sample catalog. Safe to run repeatedly:
existing departments, courses, professors and the admin are left untouched.

Run with: python -m app.db.seed_data
"""
import asyncio
from typing import Dict, List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import AsyncSessionLocal, init_db
from app.core.security import get_password_hash
from app.models import (
    Course,
    Department,
    PendingVerification,
    Professor,
    Review,
    ReviewReport,
    ReviewVote,
    User,
    UserRole,
    UserStatus,
    professor_courses,
    professor_departments,
)


# ==================== Sample Data Constants ====================

SAMPLE_DEPARTMENTS = [
    {
        "name": "Computer Science",
        "code": "CMPS",
        "faculty": "Arts and Sciences",
        "description": "Foundations of computing, software engineering and systems.",
    },
    {
        "name": "Physics",
        "code": "PHYS",
        "faculty": "Arts and Sciences",
        "description": "Classical and modern physics, from mechanics to the universe at large.",
    },
    {
        "name": "Philosophy",
        "code": "PHIL",
        "faculty": "Arts and Sciences",
        "description": "Historical and contemporary philosophers and philosophical problems.",
    },
    {
        "name": "Mathematics",
        "code": "MATH",
        "faculty": "Arts and Sciences",
        "description": "Pure and applied mathematics.",
    },
    {
        "name": "Economics",
        "code": "ECON",
        "faculty": "Arts and Sciences",
        "description": "Micro- and macroeconomic theory and its applications.",
    },
]

SAMPLE_COURSES = {
    "CMPS": [
        {"course_number": "200", "name": "Introduction to Programming", "credit_hours": 3},
        {"course_number": "201", "name": "Fundamentals of Computing", "credit_hours": 3},
        {"course_number": "202", "name": "Data Structures", "credit_hours": 3, "prerequisites": ["CMPS 201"]},
        {"course_number": "211", "name": "Discrete Structures", "credit_hours": 3},
        {"course_number": "272", "name": "Operating Systems", "credit_hours": 3, "prerequisites": ["CMPS 202"]},
    ],
    "PHYS": [
        {"course_number": "101", "name": "Introductory Physics I", "credit_hours": 3},
        {"course_number": "101L", "name": "Introductory Physics Laboratory I", "credit_hours": 1,
         "corequisites": ["PHYS 101"]},
        {"course_number": "200", "name": "Understanding the Universe", "credit_hours": 3},
        {"course_number": "210", "name": "Introductory Physics II", "credit_hours": 3, "prerequisites": ["PHYS 101"]},
        {"course_number": "211", "name": "Electricity and Magnetism", "credit_hours": 3},
    ],
    "PHIL": [
        {"course_number": "101", "name": "Applied Philosophy", "credit_hours": 3},
        {"course_number": "102", "name": "Philosophical Classics", "credit_hours": 3},
        {"course_number": "201", "name": "Introduction to Philosophy", "credit_hours": 3},
    ],
    "MATH": [
        {"course_number": "201", "name": "Calculus and Analytic Geometry III", "credit_hours": 3},
        {"course_number": "218", "name": "Elementary Linear Algebra with Applications", "credit_hours": 3},
    ],
    "ECON": [
        {"course_number": "211", "name": "Elements of Microeconomic Theory", "credit_hours": 3},
        {"course_number": "212", "name": "Elements of Macroeconomic Theory", "credit_hours": 3},
    ],
}

SAMPLE_PROFESSORS = [
    {"name": "Ali Abboud", "title": "Assistant Professor", "departments": ["ECON"], "courses": [("ECON", "211")]},
    {"name": "Nadine Yamout", "title": "Assistant Professor", "departments": ["MATH"], "courses": [("MATH", "218")]},
    {"name": "Makram Bou Nassar", "title": "Lecturer", "departments": ["MATH", "CMPS"],
     "courses": [("MATH", "201"), ("CMPS", "211")]},
    {"name": "Dana Hamdan", "title": "Instructor", "departments": ["CMPS"],
     "courses": [("CMPS", "200"), ("CMPS", "201")]},
    {"name": "Raja Sabra", "title": "Instructor", "departments": ["PHYS"], "courses": [("PHYS", "101")]},
]


# ==================== Seed Functions ====================

async def seed_admin(db: AsyncSession) -> User:
    """Create the admin account from SEED_ADMIN_* settings if missing"""
    email = settings.SEED_ADMIN_EMAIL.lower()
    result = await db.execute(select(User).where(User.email == email))
    admin = result.scalar_one_or_none()
    if admin is not None:
        print(f"Admin already exists: {email}")
        return admin

    if not settings.SEED_ADMIN_PASSWORD:
        raise RuntimeError("SEED_ADMIN_PASSWORD must be set to create the admin account")

    admin = User(
        name="Admin User",
        username=settings.SEED_ADMIN_USERNAME,
        email=email,
        hashed_password=get_password_hash(settings.SEED_ADMIN_PASSWORD),
        role=UserRole.admin,
        status=UserStatus.active,
        is_verified=True,
    )
    db.add(admin)
    await db.flush()
    print(f"Created admin: {email}")
    return admin


async def seed_departments(db: AsyncSession) -> Dict[str, Department]:
    """Create sample departments, keyed by code"""
    departments = {}
    for data in SAMPLE_DEPARTMENTS:
        result = await db.execute(select(Department).where(Department.code == data["code"]))
        department = result.scalar_one_or_none()
        if department is None:
            department = Department(**data)
            db.add(department)
            print(f"Created department: {data['code']}")
        departments[data["code"]] = department
    await db.flush()
    return departments


async def seed_courses(db: AsyncSession, departments: Dict[str, Department]) -> Dict[tuple, Course]:
    """Create sample courses, keyed by (department code, course number)"""
    courses = {}
    for code, rows in SAMPLE_COURSES.items():
        department = departments[code]
        for data in rows:
            result = await db.execute(
                select(Course).where(
                    Course.department_id == department.id,
                    Course.course_number == data["course_number"],
                )
            )
            course = result.scalar_one_or_none()
            if course is None:
                course = Course(
                    department=department,
                    description="",
                    prerequisites=data.get("prerequisites", []),
                    corequisites=data.get("corequisites", []),
                    **{k: v for k, v in data.items() if k not in ("prerequisites", "corequisites")},
                )
                db.add(course)
            courses[(code, data["course_number"])] = course
    await db.flush()
    print(f"Courses ready: {len(courses)}")
    return courses


async def seed_professors(
    db: AsyncSession,
    departments: Dict[str, Department],
    courses: Dict[tuple, Course]
) -> List[Professor]:
    professors = []
    for data in SAMPLE_PROFESSORS:
        result = await db.execute(select(Professor).where(Professor.name == data["name"]))
        professor = result.scalar_one_or_none()
        if professor is None:
            professor = Professor(
                name=data["name"],
                title=data["title"],
                avg_rating=0,
                departments=[departments[c] for c in data["departments"]],
                courses=[courses[key] for key in data["courses"]],
            )
            db.add(professor)
            print(f"Created professor: {data['name']}")
        professors.append(professor)
    await db.flush()
    return professors


async def seed_all():
    """Seed admin and catalog"""
    print("=" * 50)
    print("Starting database seeding...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
            departments = await seed_departments(db)
            courses = await seed_courses(db, departments)
            await seed_professors(db, departments, courses)

            await db.commit()
            print("=" * 50)
            print("Database seeding completed successfully!")
            print("=" * 50)

        except Exception as e:
            await db.rollback()
            print(f"Error seeding database: {e}")
            raise


async def clear_all():
    """Delete every row, children first"""
    print("Clearing all data...")
    async with AsyncSessionLocal() as db:
        for table in (
            ReviewVote.__table__,
            ReviewReport.__table__,
            Review.__table__,
            professor_courses,
            professor_departments,
            Professor.__table__,
            Course.__table__,
            Department.__table__,
            PendingVerification.__table__,
            User.__table__,
        ):
            await db.execute(delete(table))
        await db.commit()
        print("All data cleared!")


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all())
