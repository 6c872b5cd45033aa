"""
Announcement Service
Posting by admins, faculty (per course) and clubs; audience-filtered feeds.
"""

from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.exceptions import ForbiddenError, ValidationError
from auxia.core.logging_config import logger
from auxia.models.announcement import Announcement, AnnouncementAuthor, TargetAudience
from auxia.models.course import Course
from auxia.services.base import BaseService
from auxia.services.relations import CLUB_MEMBERS, COURSE_FACULTY, COURSE_STUDENTS


class AnnouncementService(BaseService):
    """Service for announcements"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def _list(self, *criteria) -> List[Announcement]:
        result = await self.db.execute(
            select(Announcement)
            .where(*criteria)
            .order_by(Announcement.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_announcement(
        self,
        created_by: AnnouncementAuthor,
        title: str,
        description: Optional[str] = None,
        target_audience: TargetAudience = TargetAudience.ALL,
        course_id: Optional[str] = None,
        club_id: Optional[str] = None,
        author_id: Optional[str] = None,
    ) -> Announcement:
        """Only the title is required"""
        if not title or not title.strip():
            raise ValidationError("Title is required", field="title")

        async with self.transaction():
            announcement = Announcement(
                title=title.strip(),
                description=description,
                created_by=created_by,
                author_id=author_id,
                target_audience=target_audience or TargetAudience.ALL,
                course_id=course_id,
                club_id=club_id,
            )
            self.db.add(announcement)

        logger.log_domain_event(
            "Announcement", "created", announcement.id,
            created_by=created_by.value, audience=announcement.target_audience.value,
        )
        return announcement

    async def delete_announcement(self, announcement_id: str) -> None:
        async with self.transaction():
            announcement = await self._load(Announcement, announcement_id)
            await self.db.delete(announcement)

        logger.log_domain_event("Announcement", "deleted", announcement_id)

    async def list_all(self) -> List[Announcement]:
        return await self._list()

    # =====================================================
    # FACULTY (course announcements)
    # =====================================================

    async def _check_allocated(self, faculty_id: str, course_id: str) -> Course:
        course = await self._load(Course, course_id)
        if not await COURSE_FACULTY.exists(self.db, course.id, faculty_id):
            raise ForbiddenError("Not authorized for this course")
        return course

    async def create_course_announcement(
        self, faculty_id: str, course_id: str, title: str, description: Optional[str] = None
    ) -> Announcement:
        course = await self._check_allocated(faculty_id, course_id)
        return await self.create_announcement(
            AnnouncementAuthor.FACULTY, title, description,
            target_audience=TargetAudience.COURSE, course_id=course.id, author_id=faculty_id,
        )

    async def list_course_announcements(self, faculty_id: str, course_id: str) -> List[Announcement]:
        course = await self._check_allocated(faculty_id, course_id)
        return await self._list(
            Announcement.course_id == course.id,
            Announcement.created_by == AnnouncementAuthor.FACULTY,
        )

    async def list_for_faculty(self, faculty_id: str) -> List[Announcement]:
        """College-wide announcements plus those for the faculty's own courses"""
        course_ids = await COURSE_FACULTY.left_ids(self.db, faculty_id)
        return await self._list(
            or_(
                Announcement.target_audience == TargetAudience.ALL,
                Announcement.course_id.in_(course_ids),
            )
        )

    # =====================================================
    # CLUBS
    # =====================================================

    async def create_club_announcement(
        self, club_id: str, title: str, description: Optional[str] = None
    ) -> Announcement:
        return await self.create_announcement(
            AnnouncementAuthor.CLUB, title, description,
            target_audience=TargetAudience.CLUB, club_id=club_id, author_id=club_id,
        )

    async def list_club_announcements(self, club_id: str) -> List[Announcement]:
        return await self._list(Announcement.club_id == club_id)

    # =====================================================
    # STUDENTS
    # =====================================================

    async def list_for_student(self, student_id: str) -> List[Announcement]:
        """All / Students audiences, plus the student's courses and clubs; newest first"""
        course_ids = await COURSE_STUDENTS.left_ids(self.db, student_id)
        club_ids = await CLUB_MEMBERS.left_ids(self.db, student_id)
        return await self._list(
            or_(
                Announcement.target_audience == TargetAudience.ALL,
                Announcement.target_audience == TargetAudience.STUDENTS,
                Announcement.course_id.in_(course_ids),
                Announcement.club_id.in_(club_ids),
            )
        )


def get_announcement_service(db: AsyncSession) -> AnnouncementService:
    return AnnouncementService(db)
