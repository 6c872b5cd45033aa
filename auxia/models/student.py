from sqlalchemy import Column, String, DateTime, Integer, Float, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid
from auxia.models.course import CourseType, course_enrollments
from auxia.models.club import club_memberships
from auxia.models.feedback import student_feedbacks


class Student(Base):
    """Student model"""
    __tablename__ = "students"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    usn = Column(String(20), unique=True, index=True, nullable=False)  # University Seat Number, e.g., 1MS21CS001
    semester = Column(Integer, nullable=False)  # 1-8
    college_email = Column(String(255), unique=True, index=True, nullable=False)
    personal_email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    department = Column(String(255), nullable=False)
    cgpa = Column(Float, nullable=True)
    interests = Column(JSON, nullable=False, default=list)
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    courses = relationship(
        "Course", secondary=course_enrollments, viewonly=True, lazy="selectin",
        order_by="Course.code",
    )
    clubs_joined = relationship(
        "Club", secondary=club_memberships, viewonly=True, lazy="selectin",
        order_by="Club.name",
    )
    # Student's own log; Feedback rows carry no link back to the submitter
    feedbacks_submitted = relationship(
        "Feedback", secondary=student_feedbacks, viewonly=True, lazy="selectin",
    )

    @property
    def core_courses(self):
        return [c for c in self.courses if c.course_type == CourseType.CORE]

    @property
    def elective_courses(self):
        return [c for c in self.courses if c.course_type == CourseType.ELECTIVE]

    def __repr__(self):
        return f"<Student {self.usn}>"
