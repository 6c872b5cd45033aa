from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from auxia.models.club import EventType
from auxia.schemas.common import StudentSummary


class MemberAdd(BaseModel):
    student_id: str


class ClubJoin(BaseModel):
    club_id: str


class ClubListing(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    members: List[StudentSummary] = []

    class Config:
        from_attributes = True


# ============================================
# Events
# ============================================

class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    event_type: EventType
    date: Optional[datetime] = None


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    event_type: Optional[EventType] = None
    date: Optional[datetime] = None


class EventResponse(BaseModel):
    id: str
    club_id: str
    name: str
    description: Optional[str] = None
    event_type: EventType
    date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class EventMutationResponse(BaseModel):
    message: str
    event: EventResponse


# ============================================
# Projects
# ============================================

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    active: Optional[bool] = None


class ProjectResponse(BaseModel):
    id: str
    club_id: str
    name: str
    description: Optional[str] = None
    active: bool
    members: List[StudentSummary] = []
    requests: List[StudentSummary] = []
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectMutationResponse(BaseModel):
    message: str
    project: ProjectResponse
