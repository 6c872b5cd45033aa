"""
Club Models
- Club (a principal that logs in with its name)
- ClubEvent and ClubProject, owned by exactly one club
- Membership tables for club members, project members and project join requests
"""

from sqlalchemy import (
    Column, String, Boolean, DateTime, Enum as SQLEnum, Text, ForeignKey, Table,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid


class EventType(str, enum.Enum):
    MEMBERS_ONLY = "members-only"
    OPEN = "open"


club_memberships = Table(
    "club_memberships",
    Base.metadata,
    Column("club_id", GUID, ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", GUID, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("joined_at", DateTime, default=datetime.utcnow),
)

project_members = Table(
    "project_members",
    Base.metadata,
    Column("project_id", GUID, ForeignKey("club_projects.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", GUID, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("added_at", DateTime, default=datetime.utcnow),
)

project_requests = Table(
    "project_requests",
    Base.metadata,
    Column("project_id", GUID, ForeignKey("club_projects.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", GUID, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("requested_at", DateTime, default=datetime.utcnow),
)


class Club(Base):
    """Student club"""
    __tablename__ = "clubs"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship(
        "Student", secondary=club_memberships, viewonly=True, lazy="selectin",
        order_by="Student.usn",
    )
    events = relationship(
        "ClubEvent", back_populates="club", cascade="all, delete-orphan",
        lazy="selectin", order_by="ClubEvent.date",
    )
    projects = relationship(
        "ClubProject", back_populates="club", cascade="all, delete-orphan",
        lazy="selectin", order_by="ClubProject.created_at",
    )

    def __repr__(self):
        return f"<Club {self.name}>"


class ClubEvent(Base):
    """Event organised by a club"""
    __tablename__ = "club_events"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    club_id = Column(GUID, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(SQLEnum(EventType), nullable=False)
    date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    club = relationship("Club", back_populates="events")

    def __repr__(self):
        return f"<ClubEvent {self.name}>"


class ClubProject(Base):
    """Project run by a club; students request to join, the club approves"""
    __tablename__ = "club_projects"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    club_id = Column(GUID, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    club = relationship("Club", back_populates="projects")
    members = relationship(
        "Student", secondary=project_members, viewonly=True, lazy="selectin",
        order_by="Student.usn",
    )
    requests = relationship(
        "Student", secondary=project_requests, viewonly=True, lazy="selectin",
        order_by="Student.usn",
    )

    def __repr__(self):
        return f"<ClubProject {self.name}>"
