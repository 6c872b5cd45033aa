from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey
from datetime import datetime
import enum

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid


class AnnouncementAuthor(str, enum.Enum):
    ADMIN = "Admin"
    FACULTY = "Faculty"
    CLUB = "Club"


class TargetAudience(str, enum.Enum):
    ALL = "All"
    COURSE = "Course"
    CLUB = "Club"
    STUDENTS = "Students"


class Announcement(Base):
    """Announcement posted by an admin, a faculty member or a club"""
    __tablename__ = "announcements"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(SQLEnum(AnnouncementAuthor), nullable=False)
    author_id = Column(GUID, nullable=True)
    target_audience = Column(SQLEnum(TargetAudience), nullable=False, default=TargetAudience.ALL)
    course_id = Column(GUID, nullable=True, index=True)
    club_id = Column(GUID, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Announcement {self.title}>"
