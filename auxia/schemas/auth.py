from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Literal

from auxia.schemas.common import USN_PATTERN, STAFF_ID_PATTERN, PHONE_PATTERN


Role = Literal["student", "faculty", "admin", "club"]


class StudentSignup(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    usn: str = Field(..., pattern=USN_PATTERN, description="University Seat Number, e.g. 1MS21CS001")
    semester: int = Field(..., ge=1, le=8)
    college_email: EmailStr
    personal_email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="10-digit phone number")
    department: str = Field(..., min_length=1, max_length=255)
    interests: List[str] = Field(default_factory=list)
    password: str = Field(..., min_length=6)


class FacultySignup(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    faculty_id: str = Field(..., pattern=STAFF_ID_PATTERN, description="e.g. FAC001")
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    department: str = Field(..., min_length=1, max_length=255)
    areas_of_expertise: List[str] = Field(default_factory=list)
    password: str = Field(..., min_length=6)


class AdminSignup(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    admin_id: str = Field(..., pattern=STAFF_ID_PATTERN, description="e.g. ADM001")
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=6)


class ClubSignup(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    # Clubs log in with their name in this field
    email: str = Field(..., min_length=1)
    password: str
    role: Role


class PrincipalInfo(BaseModel):
    """Public identity returned by signup and login"""
    id: str
    name: str
    role: Role
    usn: Optional[str] = None
    semester: Optional[int] = None
    department: Optional[str] = None
    faculty_id: Optional[str] = None
    admin_id: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: PrincipalInfo
