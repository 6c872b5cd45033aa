"""
Admin-only Schemas - account creation on behalf of others and user statistics
"""

from pydantic import BaseModel, ValidationError, model_validator
from typing import Optional, Literal, Dict, Any, List

from auxia.schemas.auth import StudentSignup, FacultySignup, AdminSignup
from auxia.schemas.common import CourseSummary


SIGNUP_SCHEMAS = {
    "student": StudentSignup,
    "faculty": FacultySignup,
    "admin": AdminSignup,
}


class UserCreate(BaseModel):
    """
    Role-polymorphic account creation.

    `data` carries the same fields as the matching signup body and is
    validated against it.
    """
    user_type: Literal["student", "faculty", "admin"]
    data: Dict[str, Any]

    @model_validator(mode='after')
    def validate_data_for_role(self):
        try:
            parsed = SIGNUP_SCHEMAS[self.user_type].model_validate(self.data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ValueError(f"Invalid {self.user_type} data: {fields}") from e
        self.data = parsed.model_dump()
        return self


class UserCreateResponse(BaseModel):
    success: bool = True
    message: str
    user: Dict[str, Any]


class UserStats(BaseModel):
    students: int
    faculty: int
    admins: int
    clubs: int


class UserStatsResponse(BaseModel):
    success: bool = True
    stats: UserStats


class StudentListing(BaseModel):
    id: str
    name: str
    usn: str
    semester: int
    department: str
    college_email: str
    phone: Optional[str] = None
    core_courses: List[CourseSummary] = []
    elective_courses: List[CourseSummary] = []

    class Config:
        from_attributes = True
