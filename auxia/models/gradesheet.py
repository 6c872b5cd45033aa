"""
Gradesheet Models
- Gradesheet: one per (student, semester), gated by a release flag
- GradeEntry: marks and letter grade for one course
"""

from sqlalchemy import (
    Column, String, Boolean, DateTime, Integer, Float, ForeignKey, UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid


class Gradesheet(Base):
    """Per-semester grade record for a student"""
    __tablename__ = "gradesheets"
    __table_args__ = (
        UniqueConstraint("student_id", "semester", name="uq_gradesheet_student_semester"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(GUID, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    semester = Column(Integer, nullable=False)
    cgpa = Column(Float, nullable=True)
    released = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("Student", lazy="selectin")
    entries = relationship(
        "GradeEntry", back_populates="gradesheet", cascade="all, delete-orphan",
        lazy="selectin", order_by="GradeEntry.position",
    )

    def entry_for(self, course_id: str):
        for entry in self.entries:
            if entry.course_id == course_id:
                return entry
        return None

    def __repr__(self):
        return f"<Gradesheet {self.student_id} sem={self.semester}>"


class GradeEntry(Base):
    """Grade for one course inside a gradesheet"""
    __tablename__ = "grade_entries"
    __table_args__ = (
        UniqueConstraint("gradesheet_id", "course_id", name="uq_grade_entry_course"),
        CheckConstraint("marks IS NULL OR (marks >= 0 AND marks <= 100)", name="ck_grade_entry_marks"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    gradesheet_id = Column(GUID, ForeignKey("gradesheets.id", ondelete="CASCADE"), nullable=False, index=True)
    # No foreign key: a deleted course leaves its id behind
    course_id = Column(GUID, nullable=False, index=True)
    marks = Column(Float, nullable=True)
    grade = Column(String(2), nullable=True)
    position = Column(Integer, nullable=False, default=0)

    gradesheet = relationship("Gradesheet", back_populates="entries")
    course = relationship(
        "Course",
        primaryjoin="foreign(GradeEntry.course_id) == Course.id",
        viewonly=True,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<GradeEntry {self.course_id} {self.grade}>"
