from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime

from auxia.models.announcement import AnnouncementAuthor, TargetAudience
from auxia.schemas.common import CourseSummary, FacultySummary


# ============================================
# Announcements
# ============================================

class AnnouncementCreate(BaseModel):
    # Blank titles are rejected by the service
    title: str
    description: Optional[str] = None
    target_audience: TargetAudience = TargetAudience.ALL


class AnnouncementPost(BaseModel):
    title: str
    description: Optional[str] = None


class AnnouncementResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    created_by: AnnouncementAuthor
    target_audience: TargetAudience
    course_id: Optional[str] = None
    club_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AnnouncementMutationResponse(BaseModel):
    message: str
    announcement: AnnouncementResponse


# ============================================
# Feedback
# ============================================

class FeedbackCreate(BaseModel):
    faculty_id: str
    course_id: Optional[str] = None
    feedback_text: str = Field(..., min_length=1)


class FeedbackResponse(BaseModel):
    """Feedback as stored; carries nothing that identifies the student"""
    id: str
    faculty_id: str
    course_id: Optional[str] = None
    feedback_text: str
    anonymous: bool
    created_at: datetime

    class Config:
        from_attributes = True


class FeedbackMutationResponse(BaseModel):
    message: str
    feedback: FeedbackResponse


class CourseFeedbackCount(BaseModel):
    course: Optional[CourseSummary] = None
    course_id: str
    feedback_count: int


class FacultyFeedbackStats(BaseModel):
    faculty: FacultySummary
    total_feedback: int
    courses: Dict[str, CourseFeedbackCount]


class FeedbackStatsResponse(BaseModel):
    faculty_stats: Dict[str, FacultyFeedbackStats]
    total_feedbacks: int
