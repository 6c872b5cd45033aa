"""
Course Registry Models
- Course with seat accounting
- course_faculty: allocation of faculty to courses
- course_enrollments: students taking a course (core or elective)
"""

from sqlalchemy import (
    Column, String, DateTime, Enum as SQLEnum, Integer, ForeignKey, Table,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid


class CourseType(str, enum.Enum):
    CORE = "core"
    ELECTIVE = "elective"


# Relationship tables: one row per (course, other side) pair
course_faculty = Table(
    "course_faculty",
    Base.metadata,
    Column("course_id", GUID, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("faculty_id", GUID, ForeignKey("faculty.id", ondelete="CASCADE"), primary_key=True),
    Column("allocated_at", DateTime, default=datetime.utcnow),
)

course_enrollments = Table(
    "course_enrollments",
    Base.metadata,
    Column("course_id", GUID, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", GUID, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("enrolled_at", DateTime, default=datetime.utcnow),
)


class Course(Base):
    """Course offered in a semester"""
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("seat_limit > 0", name="ck_courses_seat_limit_positive"),
        CheckConstraint(
            "seats_filled >= 0 AND seats_filled <= seat_limit",
            name="ck_courses_seats_within_limit",
        ),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    code = Column(String(50), unique=True, index=True, nullable=False)  # e.g., CS304
    name = Column(String(255), nullable=False)
    department = Column(String(255), nullable=True)
    course_type = Column(SQLEnum(CourseType), nullable=False)
    seat_limit = Column(Integer, nullable=False)
    seats_filled = Column(Integer, nullable=False, default=0)
    semester = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Views over the relationship tables; writes go through RelationTable
    faculty = relationship(
        "Faculty", secondary=course_faculty, viewonly=True, lazy="selectin",
        order_by="Faculty.name",
    )
    students = relationship(
        "Student", secondary=course_enrollments, viewonly=True, lazy="selectin",
        order_by="Student.usn",
    )

    @property
    def is_elective(self) -> bool:
        return self.course_type == CourseType.ELECTIVE

    @property
    def seats_available(self) -> int:
        return max(self.seat_limit - self.seats_filled, 0)

    def __repr__(self):
        return f"<Course {self.code}>"
