from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from auxia.schemas.common import CourseSummary, StudentSummary


class GradesheetGenerate(BaseModel):
    student_id: str
    semester: int = Field(..., ge=1, le=8)


class MarksUpload(BaseModel):
    # Range is checked by the service so out-of-range marks are a 400
    course_id: str
    student_id: str
    marks: float
    semester: int = Field(..., ge=1, le=8)


class MarksRow(BaseModel):
    student_id: str
    marks: float


class BulkMarksUpload(BaseModel):
    course_id: str
    semester: int = Field(..., ge=1, le=8)
    entries: List[MarksRow] = Field(..., min_length=1)


class GradeEntryResponse(BaseModel):
    course_id: str
    course: Optional[CourseSummary] = None
    marks: Optional[float] = None
    grade: Optional[str] = None

    class Config:
        from_attributes = True


class GradesheetResponse(BaseModel):
    id: str
    student_id: str
    semester: int
    entries: List[GradeEntryResponse] = []
    cgpa: Optional[float] = None
    released: bool
    created_at: datetime

    class Config:
        from_attributes = True


class GradesheetAdminView(GradesheetResponse):
    student: Optional[StudentSummary] = None


class GradesheetMutationResponse(BaseModel):
    message: str
    gradesheet: GradesheetResponse


class BulkMarksResponse(BaseModel):
    message: str
    updated: int
    gradesheets: List[GradesheetResponse]
