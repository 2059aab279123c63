from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Course(Base):
    """Course offered by one department"""
    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint("department_id", "course_number", name="uq_courses_department_number"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    course_number = Column(String(20), index=True, nullable=False)  # normalized: "CS 101" -> "CS101"
    name = Column(String(255), nullable=False)
    department_id = Column(GUID, ForeignKey("departments.id"), nullable=False, index=True)
    credit_hours = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    prerequisites = Column(JSON, default=list)
    corequisites = Column(JSON, default=list)
    syllabus = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    department = relationship("Department", lazy="selectin")

    @property
    def display_code(self) -> str:
        """'CS 101' style code used in review titles and suggestions"""
        return f"{self.department.code} {self.course_number}"

    def __repr__(self):
        return f"<Course {self.course_number}>"
