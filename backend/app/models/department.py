from sqlalchemy import Column, String, DateTime, Text

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Department(Base):
    """Academic department; ``code`` is stored upper-case"""
    __tablename__ = "departments"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    faculty = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Department {self.code}>"
