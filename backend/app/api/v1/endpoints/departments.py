"""
Departments API

Reads are public; create, update and delete require an admin.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.modules.auth import get_current_admin
from app.schemas.catalog import (
    CourseResponse,
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
)
from app.services.catalog_service import catalog_service

router = APIRouter()


@router.get("", response_model=List[DepartmentResponse])
async def list_departments(db: AsyncSession = Depends(get_db)):
    """All departments, by name"""
    return await catalog_service.list_departments(db)


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(department_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_department(db, department_id)


@router.get("/{department_id}/courses", response_model=List[CourseResponse])
async def get_department_courses(department_id: str, db: AsyncSession = Depends(get_db)):
    """Courses owned by the department, by course number"""
    department = await catalog_service.get_department(db, department_id)
    return await catalog_service.list_courses(db, department_id=department.id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_department(
    data: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    department = await catalog_service.create_department(db, data)
    return {
        "message": "Department created successfully",
        "department": DepartmentResponse.model_validate(department),
    }


@router.put("/{department_id}")
async def update_department(
    department_id: str,
    data: DepartmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    department = await catalog_service.update_department(db, department_id, data)
    return {
        "message": "Department updated successfully",
        "department": DepartmentResponse.model_validate(department),
    }


@router.delete("/{department_id}")
async def delete_department(
    department_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Refused while the department still has courses"""
    await catalog_service.delete_department(db, department_id)
    return {"message": "Department deleted successfully"}
