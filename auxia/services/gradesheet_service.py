"""
Gradesheet Service
Generation, marks upload (single and bulk), release and student access.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.exceptions import (
    AlreadyExistsError, ForbiddenError, InvalidStateError, NotFoundError, ValidationError,
)
from auxia.core.logging_config import logger
from auxia.models.course import Course
from auxia.models.gradesheet import Gradesheet, GradeEntry
from auxia.models.student import Student
from auxia.services.base import BaseService
from auxia.services.relations import COURSE_FACULTY, COURSE_STUDENTS


# Inclusive lower bounds, highest first
GRADE_TABLE: Tuple[Tuple[float, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (70, "B+"),
    (60, "B"),
    (50, "C+"),
    (40, "C"),
    (35, "D"),
)
FAILING_GRADE = "F"


def calculate_grade(marks: float) -> str:
    """Letter grade for marks in [0, 100]"""
    for lower_bound, grade in GRADE_TABLE:
        if marks >= lower_bound:
            return grade
    return FAILING_GRADE


def validate_marks(marks) -> None:
    if marks is None or isinstance(marks, bool) or not 0 <= marks <= 100:
        raise ValidationError("Marks must be between 0 and 100", field="marks")


class GradesheetService(BaseService):
    """Service for gradesheets"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def _find(self, student_id: str, semester: int) -> Optional[Gradesheet]:
        result = await self.db.execute(
            select(Gradesheet)
            .where(Gradesheet.student_id == student_id, Gradesheet.semester == semester)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_gradesheet(self, gradesheet_id: str) -> Gradesheet:
        return await self._load(Gradesheet, gradesheet_id)

    async def list_gradesheets(self) -> List[Gradesheet]:
        result = await self.db.execute(
            select(Gradesheet)
            .order_by(Gradesheet.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    # =====================================================
    # GENERATION & RELEASE (admin)
    # =====================================================

    async def generate_gradesheet(self, student_id: str, semester: int) -> Gradesheet:
        """
        Create the (student, semester) gradesheet, unreleased.

        Entries are carried forward from the student's other gradesheets for
        courses the student still takes; one entry per course, the most
        recently created gradesheet wins.
        """
        def on_conflict():
            return AlreadyExistsError("Gradesheet already exists for this semester")

        async with self.transaction(on_conflict=on_conflict):
            student = await self._load(Student, student_id)
            if await self._find(student.id, semester) is not None:
                raise on_conflict()

            current_courses = set(await COURSE_STUDENTS.left_ids(self.db, student.id))
            previous = await self.db.execute(
                select(Gradesheet)
                .where(Gradesheet.student_id == student.id)
                .order_by(Gradesheet.created_at)
                .execution_options(populate_existing=True)
            )

            carried: Dict[str, GradeEntry] = {}
            for sheet in previous.scalars().all():
                for entry in sheet.entries:
                    if entry.course_id in current_courses:
                        carried[entry.course_id] = entry

            gradesheet = Gradesheet(
                student_id=student.id,
                semester=semester,
                cgpa=None,
                released=False,
                entries=[
                    GradeEntry(course_id=course_id, marks=entry.marks, grade=entry.grade, position=i)
                    for i, (course_id, entry) in enumerate(carried.items())
                ],
            )
            self.db.add(gradesheet)

        logger.log_domain_event(
            "Gradesheet", "generated", gradesheet.id,
            student_id=student_id, semester=semester, carried=len(carried),
        )
        return await self.get_gradesheet(gradesheet.id)

    async def release_gradesheet(self, gradesheet_id: str) -> Gradesheet:
        """One-way: released gradesheets stay released"""
        async with self.transaction():
            gradesheet = await self._load(Gradesheet, gradesheet_id)
            gradesheet.released = True

        logger.log_domain_event("Gradesheet", "released", gradesheet_id)
        return await self.get_gradesheet(gradesheet_id)

    # =====================================================
    # MARKS (faculty)
    # =====================================================

    async def _check_marks_allowed(self, faculty_id: str, course: Course, student_id: str) -> None:
        if not await COURSE_FACULTY.exists(self.db, course.id, faculty_id):
            raise ForbiddenError("Not authorized for this course")
        if not await COURSE_STUDENTS.exists(self.db, course.id, student_id):
            raise InvalidStateError("Student not enrolled in this course")

    async def _upsert_entry(self, student_id: str, semester: int, course_id: str, marks: float) -> Gradesheet:
        """Write marks into the (student, semester) gradesheet, creating it lazily"""
        gradesheet = await self._find(student_id, semester)
        if gradesheet is None:
            gradesheet = Gradesheet(student_id=student_id, semester=semester, released=False, entries=[])
            self.db.add(gradesheet)

        entry = gradesheet.entry_for(course_id)
        if entry is None:
            entry = GradeEntry(course_id=course_id, position=len(gradesheet.entries))
            gradesheet.entries.append(entry)

        entry.marks = marks
        entry.grade = calculate_grade(marks)
        await self.db.flush()
        return gradesheet

    async def upload_marks(
        self,
        faculty_id: str,
        course_id: str,
        student_id: str,
        marks: float,
        semester: int,
    ) -> Gradesheet:
        """Record marks for one enrolled student; grade is derived from the table"""
        validate_marks(marks)

        async with self.transaction():
            course = await self._load(Course, course_id)
            await self._check_marks_allowed(faculty_id, course, student_id)
            gradesheet = await self._upsert_entry(student_id, semester, course.id, marks)

        logger.log_domain_event(
            "Gradesheet", "marks_uploaded", gradesheet.id,
            course_id=course_id, student_id=student_id, semester=semester,
        )
        return await self.get_gradesheet(gradesheet.id)

    async def bulk_upload_marks(
        self,
        faculty_id: str,
        course_id: str,
        semester: int,
        entries: Sequence[Tuple[str, float]],
    ) -> List[Gradesheet]:
        """
        Upload marks for many students of one course.

        Every row is validated before any is written; one bad row rejects
        the whole batch.
        """
        if not entries:
            raise ValidationError("No marks supplied", field="entries")
        for _, marks in entries:
            validate_marks(marks)

        async with self.transaction():
            course = await self._load(Course, course_id)
            for student_id, _ in entries:
                await self._check_marks_allowed(faculty_id, course, student_id)

            touched: Dict[str, str] = {}
            for student_id, marks in entries:
                gradesheet = await self._upsert_entry(student_id, semester, course.id, marks)
                touched[student_id] = gradesheet.id

        logger.log_domain_event(
            "Gradesheet", "bulk_marks_uploaded", course_id,
            rows=len(entries), semester=semester,
        )
        return [await self.get_gradesheet(gid) for gid in touched.values()]

    # =====================================================
    # STUDENT ACCESS
    # =====================================================

    async def get_student_gradesheet(self, student_id: str, semester: int) -> Gradesheet:
        gradesheet = await self._find(student_id, semester)
        if gradesheet is None:
            raise NotFoundError("Gradesheet")
        if not gradesheet.released:
            raise ForbiddenError("Gradesheet not yet released")
        return gradesheet


def get_gradesheet_service(db: AsyncSession) -> GradesheetService:
    return GradesheetService(db)
