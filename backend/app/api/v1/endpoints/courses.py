"""
Courses API

Reads are public; create, update and delete require an admin.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.review import ReviewType
from app.models.user import User
from app.modules.auth import get_current_admin
from app.schemas.catalog import CourseCreate, CourseResponse, CourseUpdate
from app.schemas.review import ReviewPage
from app.services.catalog_service import catalog_service
from app.services.review_service import review_service
from app.utils.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=List[CourseResponse])
async def list_courses(
    department: Optional[str] = Query(None, description="Filter by department id"),
    db: AsyncSession = Depends(get_db)
):
    return await catalog_service.list_courses(db, department_id=department)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_course(db, course_id)


@router.get("/{course_id}/reviews", response_model=ReviewPage)
async def get_course_reviews(
    course_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    """Approved course reviews, newest first"""
    course = await catalog_service.get_course(db, course_id)
    return await review_service.list_reviews(
        db, review_type=ReviewType.course, course_id=course.id, page=page, limit=limit
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_course(
    data: CourseCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    course = await catalog_service.create_course(db, data)
    return {
        "message": "Course created successfully",
        "course": CourseResponse.model_validate(course),
    }


@router.put("/{course_id}")
async def update_course(
    course_id: str,
    data: CourseUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    course = await catalog_service.update_course(db, course_id, data)
    return {
        "message": "Course updated successfully",
        "course": CourseResponse.model_validate(course),
    }


@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Refused while course reviews reference the course"""
    await catalog_service.delete_course(db, course_id)
    return {"message": "Course deleted successfully"}
