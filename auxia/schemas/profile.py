"""
Profile Schemas - what each role sees of itself (never the password hash)
and the fields it may change.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from auxia.models.club import EventType
from auxia.schemas.common import (
    PHONE_PATTERN, CourseSummary, ClubSummary, StudentSummary,
)


class StudentProfile(BaseModel):
    id: str
    name: str
    usn: str
    semester: int
    college_email: str
    personal_email: Optional[str] = None
    phone: Optional[str] = None
    department: str
    cgpa: Optional[float] = None
    interests: List[str] = []
    core_courses: List[CourseSummary] = []
    elective_courses: List[CourseSummary] = []
    clubs_joined: List[ClubSummary] = []
    created_at: datetime

    class Config:
        from_attributes = True


class StudentProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    personal_email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    interests: Optional[List[str]] = None


class FacultyProfile(BaseModel):
    id: str
    name: str
    faculty_id: str
    email: str
    phone: Optional[str] = None
    department: str
    areas_of_expertise: List[str] = []
    course_load: int
    courses_allocated: List[CourseSummary] = []
    created_at: datetime

    class Config:
        from_attributes = True


class FacultyProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    areas_of_expertise: Optional[List[str]] = None


class AdminProfile(BaseModel):
    id: str
    name: str
    admin_id: str
    email: str
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AdminProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)


class EventView(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    event_type: EventType
    date: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectView(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    active: bool

    class Config:
        from_attributes = True


class ClubProfile(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    members: List[StudentSummary] = []
    events: List[EventView] = []
    projects: List[ProjectView] = []
    created_at: datetime

    class Config:
        from_attributes = True


class ClubProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
