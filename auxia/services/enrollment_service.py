"""
Enrollment & Allocation Service
Course lifecycle, faculty allocation (capped per faculty) and student
enrollment (seat-capped for electives).

Counters are only ever moved by guarded UPDATE statements
(compare-and-set), so two concurrent requests can never both take the last
seat or push a faculty member past the course cap.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.config import settings
from auxia.core.exceptions import (
    AlreadyRegisteredError, CapacityExceededError, DuplicateKeyError,
    ForbiddenError, InvalidStateError, ValidationError,
)
from auxia.core.logging_config import logger
from auxia.models.course import Course, CourseType, course_faculty
from auxia.models.faculty import Faculty
from auxia.models.student import Student
from auxia.services.base import BaseService
from auxia.services.relations import COURSE_FACULTY, COURSE_STUDENTS


class EnrollmentService(BaseService):
    """Service for course registry, allocation and enrollment"""

    max_courses = settings.MAX_COURSES_PER_FACULTY

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    # =====================================================
    # READS
    # =====================================================

    async def get_course(self, course_id: str) -> Course:
        return await self._load(Course, course_id)

    async def list_courses(self) -> List[Course]:
        result = await self.db.execute(
            select(Course).order_by(Course.code).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_available_electives(self, student_id: str) -> List[Course]:
        """Electives in the student's department that still have free seats"""
        student = await self._load(Student, student_id)
        result = await self.db.execute(
            select(Course)
            .where(
                Course.course_type == CourseType.ELECTIVE,
                Course.department == student.department,
                Course.seats_filled < Course.seat_limit,
            )
            .order_by(Course.code)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_faculty_courses(self, faculty_id: str) -> List[Course]:
        result = await self.db.execute(
            select(Course)
            .join(course_faculty, course_faculty.c.course_id == Course.id)
            .where(course_faculty.c.faculty_id == faculty_id)
            .order_by(Course.code)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_course_for_faculty(self, faculty_id: str, course_id: str) -> Course:
        course = await self._load(Course, course_id)
        if not await COURSE_FACULTY.exists(self.db, course.id, faculty_id):
            raise ForbiddenError("Not authorized to view this course")
        return course

    # =====================================================
    # COUNTERS (guarded updates)
    # =====================================================

    async def _take_seat(self, course: Course) -> None:
        result = await self.db.execute(
            update(Course)
            .where(Course.id == course.id, Course.seats_filled < Course.seat_limit)
            .values(seats_filled=Course.seats_filled + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise CapacityExceededError("Course is full", limit=course.seat_limit)

    async def _free_seat(self, course_id: str) -> None:
        await self.db.execute(
            update(Course)
            .where(Course.id == course_id, Course.seats_filled > 0)
            .values(seats_filled=Course.seats_filled - 1)
            .execution_options(synchronize_session=False)
        )

    async def _allocate(self, course_id: str, faculty: Faculty) -> None:
        result = await self.db.execute(
            update(Faculty)
            .where(Faculty.id == faculty.id, Faculty.course_load < self.max_courses)
            .values(course_load=Faculty.course_load + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise self._cap_error(faculty)
        await COURSE_FACULTY.link(self.db, course_id, faculty.id)

    async def _release(self, course_id: str, faculty_id: str) -> None:
        if await COURSE_FACULTY.unlink(self.db, course_id, faculty_id):
            await self.db.execute(
                update(Faculty)
                .where(Faculty.id == faculty_id, Faculty.course_load > 0)
                .values(course_load=Faculty.course_load - 1)
                .execution_options(synchronize_session=False)
            )

    def _cap_error(self, faculty: Faculty) -> CapacityExceededError:
        return CapacityExceededError(
            f"Faculty {faculty.name} already has maximum {self.max_courses} courses allocated",
            limit=self.max_courses,
        )

    async def _load_faculty_set(self, faculty_ids: List[str]) -> List[Faculty]:
        """Resolve ids (duplicates collapsed) and check the cap against current loads"""
        faculty = [await self._load(Faculty, fid) for fid in dict.fromkeys(faculty_ids)]
        for member in faculty:
            if member.course_load >= self.max_courses:
                raise self._cap_error(member)
        return faculty

    # =====================================================
    # COURSE LIFECYCLE (admin)
    # =====================================================

    async def create_course(
        self,
        code: str,
        name: str,
        course_type: CourseType,
        seat_limit: int,
        semester: int,
        department: Optional[str] = None,
        faculty_ids: Optional[List[str]] = None,
    ) -> Course:
        """Create a course; every named faculty is validated before anything is written"""
        on_conflict = lambda: DuplicateKeyError("Course", "code", code)  # noqa: E731

        async with self.transaction(on_conflict=on_conflict):
            existing = await self.db.execute(select(Course.id).where(Course.code == code))
            if existing.scalar_one_or_none() is not None:
                raise on_conflict()
            if seat_limit <= 0:
                raise ValidationError("Seat limit must be positive", field="seat_limit")

            faculty = await self._load_faculty_set(faculty_ids or [])

            course = Course(
                code=code,
                name=name,
                department=department,
                course_type=course_type,
                seat_limit=seat_limit,
                seats_filled=0,
                semester=semester,
            )
            self.db.add(course)
            await self.db.flush()

            for member in faculty:
                await self._allocate(course.id, member)

        logger.log_domain_event("Course", "created", course.id, code=code, faculty=len(faculty))
        return await self.get_course(course.id)

    async def update_course(
        self,
        course_id: str,
        name: Optional[str] = None,
        department: Optional[str] = None,
        seat_limit: Optional[int] = None,
        semester: Optional[int] = None,
        faculty_ids: Optional[List[str]] = None,
    ) -> Course:
        """
        Update a course in three named phases:

        1. release - unlink every current faculty member and decrement their load
        2. check   - validate the new faculty set against the post-release loads
        3. apply   - write field changes, then link the new set

        Releasing first lets a faculty member already teaching this course
        (and so sitting at the cap) be kept on it. `faculty_ids=None` keeps
        the current allocation untouched.
        """
        async with self.transaction():
            course = await self._load(Course, course_id)

            if seat_limit is not None and seat_limit < course.seats_filled:
                raise ValidationError(
                    f"Seat limit cannot be below the {course.seats_filled} seats already filled",
                    field="seat_limit",
                )

            new_faculty: List[Faculty] = []
            if faculty_ids is not None:
                # Phase 1: release
                for faculty_id in await COURSE_FACULTY.right_ids(self.db, course.id):
                    await self._release(course.id, faculty_id)
                # Phase 2: check (loads re-read after the release)
                new_faculty = await self._load_faculty_set(faculty_ids)

            # Phase 3: apply
            changes = {
                "name": name,
                "department": department,
                "seat_limit": seat_limit,
                "semester": semester,
            }
            for field, value in changes.items():
                if value is not None:
                    setattr(course, field, value)
            await self.db.flush()

            for member in new_faculty:
                await self._allocate(course.id, member)

        logger.log_domain_event("Course", "updated", course_id)
        return await self.get_course(course_id)

    async def delete_course(self, course_id: str) -> None:
        """Delete a course; grade entries and announcements keep the stale id"""
        async with self.transaction():
            course = await self._load(Course, course_id)
            for faculty_id in await COURSE_FACULTY.right_ids(self.db, course.id):
                await self._release(course.id, faculty_id)
            await COURSE_STUDENTS.unlink_left(self.db, course.id)
            await self.db.delete(course)

        logger.log_domain_event("Course", "deleted", course_id)

    async def assign_core_course(self, student_id: str, course_id: str) -> Course:
        """Department assignment of a core course; uncapped, seats untouched"""
        async with self.transaction(on_conflict=AlreadyRegisteredError):
            course = await self._load(Course, course_id)
            await self._load(Student, student_id)
            if course.course_type != CourseType.CORE:
                raise InvalidStateError("Only core courses can be assigned")
            if await COURSE_STUDENTS.exists(self.db, course.id, student_id):
                raise AlreadyRegisteredError("Student already takes this course")
            await COURSE_STUDENTS.link(self.db, course.id, student_id)

        logger.log_domain_event("Course", "core_assigned", course_id, student_id=student_id)
        return await self.get_course(course_id)

    # =====================================================
    # ELECTIVE REGISTRATION (student)
    # =====================================================

    async def register_course(self, student_id: str, course_id: str) -> Course:
        """Take a seat in an elective"""
        async with self.transaction(on_conflict=AlreadyRegisteredError):
            await self._load(Student, student_id)
            course = await self._load(Course, course_id)
            if course.course_type != CourseType.ELECTIVE:
                raise InvalidStateError("Can only register for elective courses")
            if course.seats_filled >= course.seat_limit:
                raise CapacityExceededError("Course is full", limit=course.seat_limit)
            if await COURSE_STUDENTS.exists(self.db, course.id, student_id):
                raise AlreadyRegisteredError()

            await self._take_seat(course)
            await COURSE_STUDENTS.link(self.db, course.id, student_id)

        logger.log_domain_event("Course", "registered", course_id, student_id=student_id)
        return await self.get_course(course_id)

    async def drop_course(self, student_id: str, course_id: str) -> Course:
        """Give up an elective seat; dropping a course not taken changes nothing"""
        async with self.transaction():
            course = await self._load(Course, course_id)
            if course.course_type != CourseType.ELECTIVE:
                raise InvalidStateError("Core courses cannot be dropped")
            if await COURSE_STUDENTS.unlink(self.db, course.id, student_id):
                await self._free_seat(course.id)

        logger.log_domain_event("Course", "dropped", course_id, student_id=student_id)
        return await self.get_course(course_id)


def get_enrollment_service(db: AsyncSession) -> EnrollmentService:
    return EnrollmentService(db)
