from sqlalchemy import Column, String, Float, DateTime, Text, ForeignKey, Table
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


professor_departments = Table(
    "professor_departments",
    Base.metadata,
    Column("professor_id", GUID, ForeignKey("professors.id", ondelete="CASCADE"), primary_key=True),
    Column("department_id", GUID, ForeignKey("departments.id", ondelete="CASCADE"), primary_key=True),
)

professor_courses = Table(
    "professor_courses",
    Base.metadata,
    Column("professor_id", GUID, ForeignKey("professors.id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", GUID, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)


class Professor(Base):
    """Professor model. ``avg_rating`` is written only by the rating aggregator"""
    __tablename__ = "professors"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), index=True, nullable=False)
    title = Column(String(100), default="Professor", nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    bio = Column(Text, nullable=True)
    office = Column(String(255), nullable=True)
    office_hours = Column(String(255), nullable=True)
    profile_image = Column(Text, nullable=True)
    avg_rating = Column(Float, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    departments = relationship("Department", secondary=professor_departments, lazy="selectin")
    courses = relationship("Course", secondary=professor_courses, lazy="selectin")

    def __repr__(self):
        return f"<Professor {self.name}>"
