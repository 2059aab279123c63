from pydantic import BaseModel
from typing import List, Literal

from app.schemas.catalog import DepartmentSummary, CourseResponse, ProfessorResponse


class SearchResults(BaseModel):
    departments: List[DepartmentSummary] = []
    courses: List[CourseResponse] = []
    professors: List[ProfessorResponse] = []


class Suggestion(BaseModel):
    id: str
    display_text: str
    subtext: str
    entity_type: Literal["department", "course", "professor"]
