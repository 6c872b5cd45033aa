from sqlalchemy import Column, Boolean, DateTime, Text, ForeignKey, Table
from sqlalchemy.orm import relationship
from datetime import datetime

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid


# Links a student to the feedback they submitted. Never exposed on the
# faculty/admin side, which keeps feedback anonymous.
student_feedbacks = Table(
    "student_feedbacks",
    Base.metadata,
    Column("student_id", GUID, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("feedback_id", GUID, ForeignKey("feedbacks.id", ondelete="CASCADE"), primary_key=True),
)


class Feedback(Base):
    """Anonymous feedback about a faculty member"""
    __tablename__ = "feedbacks"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    faculty_id = Column(GUID, ForeignKey("faculty.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(GUID, nullable=True, index=True)
    feedback_text = Column(Text, nullable=False)
    anonymous = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    faculty = relationship("Faculty", lazy="selectin")

    def __repr__(self):
        return f"<Feedback {self.id}>"
