from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from auxia.models.course import CourseType
from auxia.schemas.common import FacultySummary, StudentSummary


class CourseCreate(BaseModel):
    """Create a course and allocate faculty to it"""
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = None
    course_type: CourseType
    seat_limit: int = Field(..., gt=0)
    semester: int = Field(..., ge=1, le=8)
    faculty_ids: List[str] = Field(default_factory=list)


class CourseUpdate(BaseModel):
    """Update course fields; faculty_ids replaces the allocation when given"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None
    seat_limit: Optional[int] = Field(None, gt=0)
    semester: Optional[int] = Field(None, ge=1, le=8)
    faculty_ids: Optional[List[str]] = None


class CourseResponse(BaseModel):
    id: str
    code: str
    name: str
    department: Optional[str] = None
    course_type: CourseType
    seat_limit: int
    seats_filled: int
    semester: int
    faculty: List[FacultySummary] = []
    students: List[StudentSummary] = []
    created_at: datetime

    class Config:
        from_attributes = True


class CourseMutationResponse(BaseModel):
    message: str
    course: CourseResponse


class CourseSelection(BaseModel):
    """Body for elective register / drop"""
    course_id: str


class CoreStudentAssignment(BaseModel):
    student_id: str
