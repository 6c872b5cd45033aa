from sqlalchemy import Column, String, DateTime, Integer, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from auxia.core.config import settings
from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid
from auxia.models.course import course_faculty


class Faculty(Base):
    """Faculty member; teaches at most MAX_COURSES_PER_FACULTY courses"""
    __tablename__ = "faculty"
    __table_args__ = (
        CheckConstraint(
            f"course_load >= 0 AND course_load <= {settings.MAX_COURSES_PER_FACULTY}",
            name="ck_faculty_course_load",
        ),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    faculty_id = Column(String(20), unique=True, index=True, nullable=False)  # e.g., FAC001
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    department = Column(String(255), nullable=False)
    areas_of_expertise = Column(JSON, nullable=False, default=list)
    hashed_password = Column(String(255), nullable=False)

    # Mirrors the number of course_faculty rows; guarded by conditional updates
    course_load = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    courses_allocated = relationship(
        "Course", secondary=course_faculty, viewonly=True, lazy="selectin",
        order_by="Course.code",
    )

    def __repr__(self):
        return f"<Faculty {self.faculty_id}>"
