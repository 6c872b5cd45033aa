"""
Shared pieces for the Auxia schemas: field patterns and the compact
"summary" views used when one record embeds another.
"""

from pydantic import BaseModel
from typing import Optional

from auxia.models.course import CourseType


USN_PATTERN = r'^\d[A-Z]{2}\d{2}[A-Z]{2}\d{3}$'          # e.g., 1MS21CS001
STAFF_ID_PATTERN = r'^[A-Z]{3}\d{3}$'                     # e.g., FAC001, ADM001
PHONE_PATTERN = r'^\d{10}$'


class StudentSummary(BaseModel):
    id: str
    name: str
    usn: str
    semester: int
    department: str

    class Config:
        from_attributes = True


class FacultySummary(BaseModel):
    id: str
    name: str
    faculty_id: str
    department: str

    class Config:
        from_attributes = True


class CourseSummary(BaseModel):
    id: str
    code: str
    name: str
    department: Optional[str] = None
    course_type: CourseType

    class Config:
        from_attributes = True


class ClubSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
