"""
Professors API

Reads are public; create, update and delete require an admin. Deleting a
professor also deletes their professor reviews.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.modules.auth import get_current_admin
from app.schemas.catalog import ProfessorCreate, ProfessorResponse, ProfessorUpdate
from app.services.catalog_service import catalog_service

router = APIRouter()


@router.get("", response_model=List[ProfessorResponse])
async def list_professors(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_professors(db)


@router.get("/department/{department_id}", response_model=List[ProfessorResponse])
async def get_professors_by_department(department_id: str, db: AsyncSession = Depends(get_db)):
    department = await catalog_service.get_department(db, department_id)
    return await catalog_service.list_professors(db, department_id=department.id)


@router.get("/{professor_id}", response_model=ProfessorResponse)
async def get_professor(professor_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_professor(db, professor_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_professor(
    data: ProfessorCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    professor = await catalog_service.create_professor(db, data)
    return {
        "message": "Professor created successfully",
        "professor": ProfessorResponse.model_validate(professor),
    }


@router.put("/{professor_id}")
async def update_professor(
    professor_id: str,
    data: ProfessorUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    professor = await catalog_service.update_professor(db, professor_id, data)
    return {
        "message": "Professor updated successfully",
        "professor": ProfessorResponse.model_validate(professor),
    }


@router.delete("/{professor_id}")
async def delete_professor(
    professor_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    deleted_reviews = await catalog_service.delete_professor(db, professor_id)
    return {
        "message": "Professor and associated reviews deleted successfully",
        "deleted_reviews": deleted_reviews,
    }
