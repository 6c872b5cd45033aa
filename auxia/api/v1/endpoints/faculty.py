"""
Faculty API Endpoints
Profile, allocated courses, marks upload and course announcements.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from auxia.core.database import get_db
from auxia.models.faculty import Faculty
from auxia.modules.auth.dependencies import get_current_faculty
from auxia.schemas.announcement import (
    AnnouncementResponse, AnnouncementMutationResponse, AnnouncementPost,
)
from auxia.schemas.course import CourseResponse
from auxia.schemas.gradesheet import (
    MarksUpload, BulkMarksUpload, GradesheetMutationResponse, BulkMarksResponse,
)
from auxia.schemas.profile import FacultyProfile, FacultyProfileUpdate
from auxia.services.announcement_service import AnnouncementService
from auxia.services.enrollment_service import EnrollmentService
from auxia.services.gradesheet_service import GradesheetService
from auxia.services.identity_service import IdentityService

router = APIRouter()


@router.get("/profile", response_model=FacultyProfile)
async def get_profile(faculty: Faculty = Depends(get_current_faculty)):
    return faculty


@router.put("/profile", response_model=FacultyProfile)
async def update_profile(
    payload: FacultyProfileUpdate,
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    return await IdentityService(db).update_profile("faculty", faculty.id, payload.model_dump())


# ==================== Courses ====================

@router.get("/courses", response_model=List[CourseResponse])
async def list_allocated_courses(
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    return await EnrollmentService(db).list_faculty_courses(faculty.id)


@router.get("/courses/{course_id}/students", response_model=CourseResponse)
async def get_course_students(
    course_id: str,
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    """Course with its students; only for faculty allocated to it"""
    return await EnrollmentService(db).get_course_for_faculty(faculty.id, course_id)


# ==================== Marks ====================

@router.post("/courses/marks", response_model=GradesheetMutationResponse)
async def upload_marks(
    payload: MarksUpload,
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    gradesheet = await GradesheetService(db).upload_marks(
        faculty.id, payload.course_id, payload.student_id, payload.marks, payload.semester,
    )
    return {"message": "Marks uploaded successfully", "gradesheet": gradesheet}


@router.post("/courses/marks/bulk", response_model=BulkMarksResponse)
async def bulk_upload_marks(
    payload: BulkMarksUpload,
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    """All rows are applied or none are"""
    gradesheets = await GradesheetService(db).bulk_upload_marks(
        faculty.id,
        payload.course_id,
        payload.semester,
        [(row.student_id, row.marks) for row in payload.entries],
    )
    return {
        "message": "Marks uploaded successfully",
        "updated": len(payload.entries),
        "gradesheets": gradesheets,
    }


# ==================== Announcements ====================

@router.post(
    "/courses/{course_id}/announcements",
    response_model=AnnouncementMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_course_announcement(
    course_id: str,
    payload: AnnouncementPost,
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    announcement = await AnnouncementService(db).create_course_announcement(
        faculty.id, course_id, payload.title, payload.description,
    )
    return {"message": "Announcement created successfully", "announcement": announcement}


@router.get("/courses/{course_id}/announcements", response_model=List[AnnouncementResponse])
async def list_course_announcements(
    course_id: str,
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    return await AnnouncementService(db).list_course_announcements(faculty.id, course_id)


@router.get("/announcements", response_model=List[AnnouncementResponse])
async def list_announcements(
    faculty: Faculty = Depends(get_current_faculty),
    db: AsyncSession = Depends(get_db)
):
    return await AnnouncementService(db).list_for_faculty(faculty.id)
