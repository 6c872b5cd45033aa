"""
Admin API Endpoints
Courses and faculty allocation, accounts, gradesheets, feedback statistics
and college-wide announcements.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from auxia.core.database import get_db
from auxia.models.admin import Admin
from auxia.models.announcement import AnnouncementAuthor
from auxia.modules.auth.dependencies import get_current_admin
from auxia.schemas.admin import (
    UserCreate, UserCreateResponse, UserStatsResponse, StudentListing,
)
from auxia.schemas.announcement import (
    AnnouncementCreate, AnnouncementResponse, AnnouncementMutationResponse,
    FeedbackStatsResponse,
)
from auxia.schemas.common import MessageResponse
from auxia.schemas.course import (
    CourseCreate, CourseUpdate, CourseResponse, CourseMutationResponse, CoreStudentAssignment,
)
from auxia.schemas.gradesheet import (
    GradesheetGenerate, GradesheetAdminView, GradesheetMutationResponse,
)
from auxia.schemas.profile import AdminProfile, AdminProfileUpdate, FacultyProfile
from auxia.services.announcement_service import AnnouncementService
from auxia.services.enrollment_service import EnrollmentService
from auxia.services.feedback_service import FeedbackService
from auxia.services.gradesheet_service import GradesheetService
from auxia.services.identity_service import IdentityService

router = APIRouter()


# ==================== Profile ====================

@router.get("/profile", response_model=AdminProfile)
async def get_profile(admin: Admin = Depends(get_current_admin)):
    return admin


@router.put("/profile", response_model=AdminProfile)
async def update_profile(
    payload: AdminProfileUpdate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await IdentityService(db).update_profile("admin", admin.id, payload.model_dump())


# ==================== Courses ====================

@router.post("/courses", response_model=CourseMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseCreate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a course; each named faculty must have fewer than 3 courses"""
    course = await EnrollmentService(db).create_course(**payload.model_dump())
    return {"message": "Course created successfully", "course": course}


@router.get("/courses", response_model=List[CourseResponse])
async def list_courses(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await EnrollmentService(db).list_courses()


@router.put("/courses/{course_id}", response_model=CourseMutationResponse)
async def update_course(
    course_id: str,
    payload: CourseUpdate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update a course; `faculty_ids`, when present, replaces the allocation"""
    course = await EnrollmentService(db).update_course(course_id, **payload.model_dump())
    return {"message": "Course updated successfully", "course": course}


@router.delete("/courses/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: str,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await EnrollmentService(db).delete_course(course_id)
    return {"message": "Course deleted successfully"}


@router.post("/courses/{course_id}/core-students", response_model=CourseMutationResponse)
async def assign_core_student(
    course_id: str,
    payload: CoreStudentAssignment,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    course = await EnrollmentService(db).assign_core_course(payload.student_id, course_id)
    return {"message": "Core course assigned successfully", "course": course}


# ==================== Accounts ====================

@router.get("/faculty", response_model=List[FacultyProfile])
async def list_faculty(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await IdentityService(db).list_faculty()


@router.get("/students", response_model=List[StudentListing])
async def list_students(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await IdentityService(db).list_students()


@router.get("/users/stats", response_model=UserStatsResponse)
async def user_stats(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return {"success": True, "stats": await IdentityService(db).user_stats()}


@router.post("/users", response_model=UserCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a student, faculty or admin account on their behalf"""
    service = IdentityService(db)
    user = await service.create_user(payload.user_type, payload.data)
    return {
        "success": True,
        "message": f"{payload.user_type.capitalize()} created successfully",
        "user": service.public_view(payload.user_type, user).model_dump(),
    }


# ==================== Gradesheets ====================

@router.post("/gradesheets/generate", response_model=GradesheetMutationResponse, status_code=status.HTTP_201_CREATED)
async def generate_gradesheet(
    payload: GradesheetGenerate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    gradesheet = await GradesheetService(db).generate_gradesheet(payload.student_id, payload.semester)
    return {"message": "Gradesheet generated successfully", "gradesheet": gradesheet}


@router.put("/gradesheets/{gradesheet_id}/release", response_model=GradesheetMutationResponse)
async def release_gradesheet(
    gradesheet_id: str,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    gradesheet = await GradesheetService(db).release_gradesheet(gradesheet_id)
    return {"message": "Gradesheet released successfully", "gradesheet": gradesheet}


@router.get("/gradesheets", response_model=List[GradesheetAdminView])
async def list_gradesheets(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await GradesheetService(db).list_gradesheets()


# ==================== Feedback ====================

@router.get("/feedback/stats", response_model=FeedbackStatsResponse)
async def feedback_stats(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await FeedbackService(db).feedback_stats()


# ==================== Announcements ====================

@router.post("/announcements", response_model=AnnouncementMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    announcement = await AnnouncementService(db).create_announcement(
        AnnouncementAuthor.ADMIN,
        payload.title,
        payload.description,
        target_audience=payload.target_audience,
        author_id=admin.id,
    )
    return {"message": "Announcement created successfully", "announcement": announcement}


@router.get("/announcements", response_model=List[AnnouncementResponse])
async def list_announcements(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await AnnouncementService(db).list_all()


@router.delete("/announcements/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: str,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await AnnouncementService(db).delete_announcement(announcement_id)
    return {"message": "Announcement deleted successfully"}
