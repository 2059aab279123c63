"""Department, course and professor schemas"""
import re
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

COURSE_NUMBER_RE = re.compile(r'^[A-Z0-9]+$')


def normalize_course_number(value: str) -> str:
    """'cs 101 ' -> 'CS101'; raises ValueError unless the result is alphanumeric"""
    normalized = re.sub(r'\s+', '', value or '').upper()
    if not COURSE_NUMBER_RE.match(normalized):
        raise ValueError("Course number must contain only letters and numbers")
    return normalized


def normalize_department_code(value: str) -> str:
    normalized = (value or '').strip().upper()
    if not normalized:
        raise ValueError("Department code is required")
    return normalized


# ==================== Departments ====================

class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=20)
    description: Optional[str] = ""
    faculty: str = Field(..., min_length=1, max_length=255)

    @field_validator('code')
    @classmethod
    def upper_code(cls, v: str) -> str:
        return normalize_department_code(v)


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    description: Optional[str] = None
    faculty: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator('code')
    @classmethod
    def upper_code(cls, v: Optional[str]) -> Optional[str]:
        return normalize_department_code(v) if v is not None else v


class DepartmentSummary(BaseModel):
    id: str
    name: str
    code: str

    class Config:
        from_attributes = True


class DepartmentResponse(DepartmentSummary):
    description: Optional[str] = None
    faculty: str
    created_at: datetime


# ==================== Courses ====================

class CourseCreate(BaseModel):
    course_number: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., description="Department id")
    credit_hours: int = Field(..., ge=0, le=12)
    description: Optional[str] = ""
    prerequisites: List[str] = []
    corequisites: List[str] = []
    syllabus: Optional[str] = ""

    @field_validator('course_number')
    @classmethod
    def normalize_number(cls, v: str) -> str:
        return normalize_course_number(v)


class CourseUpdate(BaseModel):
    course_number: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None
    credit_hours: Optional[int] = Field(None, ge=0, le=12)
    description: Optional[str] = None
    prerequisites: Optional[List[str]] = None
    corequisites: Optional[List[str]] = None
    syllabus: Optional[str] = None

    @field_validator('course_number')
    @classmethod
    def normalize_number(cls, v: Optional[str]) -> Optional[str]:
        return normalize_course_number(v) if v is not None else v


class CourseSummary(BaseModel):
    id: str
    course_number: str
    name: str

    class Config:
        from_attributes = True


class CourseResponse(CourseSummary):
    department: DepartmentSummary
    credit_hours: int
    description: Optional[str] = None
    prerequisites: List[str] = []
    corequisites: List[str] = []
    syllabus: Optional[str] = None
    created_at: datetime

    @field_validator('prerequisites', 'corequisites', mode='before')
    @classmethod
    def none_to_list(cls, v):
        return v or []


# ==================== Professors ====================

class ProfessorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    departments: List[str] = Field(..., min_length=1, description="Department ids")
    title: str = "Professor"
    email: Optional[EmailStr] = None
    bio: Optional[str] = ""
    office: Optional[str] = ""
    office_hours: Optional[str] = ""
    profile_image: Optional[str] = ""
    courses: List[str] = []

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class ProfessorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    departments: Optional[List[str]] = Field(None, min_length=1)
    title: Optional[str] = None
    email: Optional[EmailStr] = None
    bio: Optional[str] = None
    office: Optional[str] = None
    office_hours: Optional[str] = None
    profile_image: Optional[str] = None
    courses: Optional[List[str]] = None


class ProfessorSummary(BaseModel):
    id: str
    name: str
    title: str
    avg_rating: float = 0

    class Config:
        from_attributes = True


class ProfessorResponse(ProfessorSummary):
    email: Optional[str] = None
    bio: Optional[str] = None
    office: Optional[str] = None
    office_hours: Optional[str] = None
    profile_image: Optional[str] = None
    departments: List[DepartmentSummary] = []
    courses: List[CourseSummary] = []
    created_at: datetime
