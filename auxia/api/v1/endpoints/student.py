"""
Student API Endpoints
Profile, elective registration, gradesheets, clubs, project requests,
feedback and the announcement feed.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from auxia.core.database import get_db
from auxia.models.student import Student
from auxia.modules.auth.dependencies import get_current_student
from auxia.schemas.announcement import (
    AnnouncementResponse, FeedbackCreate, FeedbackResponse, FeedbackMutationResponse,
)
from auxia.schemas.club import ClubJoin, ClubListing, ProjectMutationResponse
from auxia.schemas.common import MessageResponse
from auxia.schemas.course import CourseResponse, CourseSelection
from auxia.schemas.gradesheet import GradesheetResponse
from auxia.schemas.profile import StudentProfile, StudentProfileUpdate
from auxia.services.announcement_service import AnnouncementService
from auxia.services.enrollment_service import EnrollmentService
from auxia.services.feedback_service import FeedbackService
from auxia.services.gradesheet_service import GradesheetService
from auxia.services.identity_service import IdentityService
from auxia.services.membership_service import MembershipService

router = APIRouter()


@router.get("/profile", response_model=StudentProfile)
async def get_profile(student: Student = Depends(get_current_student)):
    return student


@router.put("/profile", response_model=StudentProfile)
async def update_profile(
    payload: StudentProfileUpdate,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    return await IdentityService(db).update_profile("student", student.id, payload.model_dump())


# ==================== Courses ====================

@router.get("/courses/elective", response_model=List[CourseResponse])
async def list_electives(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """Electives of the student's department with seats left"""
    return await EnrollmentService(db).list_available_electives(student.id)


@router.post("/courses/register", response_model=MessageResponse)
async def register_course(
    payload: CourseSelection,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    await EnrollmentService(db).register_course(student.id, payload.course_id)
    return {"message": "Course registered successfully"}


@router.delete("/courses/drop", response_model=MessageResponse)
async def drop_course(
    payload: CourseSelection,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    await EnrollmentService(db).drop_course(student.id, payload.course_id)
    return {"message": "Course dropped successfully"}


# ==================== Gradesheet ====================

@router.get("/gradesheet", response_model=GradesheetResponse)
async def get_gradesheet(
    semester: Optional[int] = Query(None, ge=1, le=8),
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """Released gradesheet for `semester` (defaults to the current one)"""
    return await GradesheetService(db).get_student_gradesheet(student.id, semester or student.semester)


# ==================== Clubs & projects ====================

@router.get("/clubs", response_model=List[ClubListing])
async def list_clubs(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    return await MembershipService(db).list_clubs()


@router.post("/clubs/join", response_model=MessageResponse)
async def join_club(
    payload: ClubJoin,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    await MembershipService(db).join_club(student.id, payload.club_id)
    return {"message": "Successfully joined club"}


@router.post("/projects/{project_id}/request", response_model=ProjectMutationResponse)
async def request_project(
    project_id: str,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    project = await MembershipService(db).request_project(student.id, project_id)
    return {"message": "Project join request sent", "project": project}


# ==================== Feedback ====================

@router.post("/feedback", response_model=FeedbackMutationResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    payload: FeedbackCreate,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    feedback = await FeedbackService(db).submit_feedback(
        student.id, payload.faculty_id, payload.feedback_text, course_id=payload.course_id,
    )
    return {"message": "Feedback submitted successfully", "feedback": feedback}


@router.get("/feedback", response_model=List[FeedbackResponse])
async def list_my_feedback(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    return await FeedbackService(db).list_student_feedback(student.id)


# ==================== Announcements ====================

@router.get("/announcements", response_model=List[AnnouncementResponse])
async def list_announcements(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    return await AnnouncementService(db).list_for_student(student.id)
