"""
Unit Tests for EnrollmentService

Course lifecycle, capped faculty allocation and elective registration.
Ids are captured before any call expected to fail: the rollback expires
every object in the session.
"""
import pytest
from sqlalchemy import select, func

from auxia.core.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    DuplicateKeyError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from auxia.models import Course, CourseType, Faculty, course_enrollments
from auxia.services.enrollment_service import EnrollmentService
from auxia.services.identity_service import IdentityService


async def course_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Course))).scalar_one()


async def faculty_load(db, faculty_id: str) -> int:
    result = await db.execute(
        select(Faculty.course_load).where(Faculty.id == faculty_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


class TestCreateCourse:
    """Admin creates courses and allocates faculty"""

    async def test_create_allocates_faculty(self, db_session, faculty):
        service = EnrollmentService(db_session)

        course = await service.create_course(
            "CS301", "Data Structures", CourseType.CORE, 60, 3,
            department="Computer Science", faculty_ids=[faculty.id],
        )

        assert course.seats_filled == 0
        assert [f.id for f in course.faculty] == [faculty.id]
        assert await faculty_load(db_session, faculty.id) == 1

    async def test_duplicate_faculty_ids_collapse(self, db_session, faculty):
        service = EnrollmentService(db_session)

        course = await service.create_course(
            "CS301", "Data Structures", CourseType.CORE, 60, 3, faculty_ids=[faculty.id, faculty.id],
        )

        assert len(course.faculty) == 1
        assert await faculty_load(db_session, faculty.id) == 1

    async def test_duplicate_code_rejected(self, db_session, make_course):
        await make_course(code="CS301")
        service = EnrollmentService(db_session)

        with pytest.raises(DuplicateKeyError):
            await service.create_course("CS301", "Again", CourseType.CORE, 10, 3)

        assert await course_count(db_session) == 1

    async def test_unknown_faculty_creates_nothing(self, db_session):
        service = EnrollmentService(db_session)

        with pytest.raises(NotFoundError):
            await service.create_course(
                "CS301", "Data Structures", CourseType.CORE, 60, 3,
                faculty_ids=["7c0e4f0e-0000-4000-8000-000000000000"],
            )

        assert await course_count(db_session) == 0

    async def test_full_faculty_blocks_creation(self, db_session, faculty):
        """A faculty member at the cap rejects the whole course"""
        faculty_id = faculty.id
        service = EnrollmentService(db_session)
        for n in range(3):
            await service.create_course(f"CS30{n}", f"Course {n}", CourseType.CORE, 60, 3, faculty_ids=[faculty_id])

        with pytest.raises(CapacityExceededError) as exc_info:
            await service.create_course("CS309", "One too many", CourseType.CORE, 60, 3, faculty_ids=[faculty_id])

        assert exc_info.value.details["limit"] == 3
        assert await course_count(db_session) == 3
        assert await faculty_load(db_session, faculty_id) == 3

    async def test_cap_checked_for_every_faculty_before_writing(self, db_session, make_faculty):
        free = await make_faculty()
        full = await make_faculty(course_load=3)
        free_id, full_id = free.id, full.id
        service = EnrollmentService(db_session)

        with pytest.raises(CapacityExceededError):
            await service.create_course("CS301", "DS", CourseType.CORE, 60, 3, faculty_ids=[free_id, full_id])

        assert await faculty_load(db_session, free_id) == 0
        assert await course_count(db_session) == 0


class TestUpdateCourse:
    """Release, then check, then apply"""

    async def test_keeps_faculty_already_at_cap(self, db_session, faculty):
        faculty_id = faculty.id
        service = EnrollmentService(db_session)
        courses = [
            await service.create_course(f"CS30{n}", f"Course {n}", CourseType.CORE, 60, 3, faculty_ids=[faculty_id])
            for n in range(3)
        ]

        updated = await service.update_course(courses[0].id, name="Renamed", faculty_ids=[faculty_id])

        assert updated.name == "Renamed"
        assert [f.id for f in updated.faculty] == [faculty_id]
        assert await faculty_load(db_session, faculty_id) == 3

    async def test_replacing_faculty_moves_load(self, db_session, make_faculty):
        old = await make_faculty()
        new = await make_faculty()
        service = EnrollmentService(db_session)
        course = await service.create_course("CS301", "DS", CourseType.CORE, 60, 3, faculty_ids=[old.id])

        updated = await service.update_course(course.id, faculty_ids=[new.id])

        assert [f.id for f in updated.faculty] == [new.id]
        assert await faculty_load(db_session, old.id) == 0
        assert await faculty_load(db_session, new.id) == 1

    async def test_omitted_faculty_leaves_allocation(self, db_session, faculty):
        service = EnrollmentService(db_session)
        course = await service.create_course("CS301", "DS", CourseType.CORE, 60, 3, faculty_ids=[faculty.id])

        updated = await service.update_course(course.id, semester=4)

        assert updated.semester == 4
        assert [f.id for f in updated.faculty] == [faculty.id]
        assert await faculty_load(db_session, faculty.id) == 1

    async def test_failed_reallocation_restores_old_allocation(self, db_session, make_faculty):
        old = await make_faculty()
        full = await make_faculty(course_load=3)
        old_id, full_id = old.id, full.id
        service = EnrollmentService(db_session)
        course = await service.create_course("CS301", "DS", CourseType.CORE, 60, 3, faculty_ids=[old_id])
        course_id = course.id

        with pytest.raises(CapacityExceededError):
            await service.update_course(course_id, faculty_ids=[full_id])

        reloaded = await service.get_course(course_id)
        assert [f.id for f in reloaded.faculty] == [old_id]
        assert await faculty_load(db_session, old_id) == 1

    async def test_seat_limit_below_filled_rejected(self, db_session, make_course, make_student):
        course = await make_course(seat_limit=2)
        course_id = course.id
        service = EnrollmentService(db_session)
        for _ in range(2):
            student = await make_student()
            await service.register_course(student.id, course_id)

        with pytest.raises(ValidationError):
            await service.update_course(course_id, seat_limit=1)

        assert (await service.get_course(course_id)).seat_limit == 2

    async def test_unknown_course(self, db_session):
        with pytest.raises(NotFoundError):
            await EnrollmentService(db_session).update_course("not-a-uuid", name="x")


class TestDeleteCourse:

    async def test_delete_releases_faculty_and_students(self, db_session, faculty, student):
        faculty_id, student_id = faculty.id, student.id
        service = EnrollmentService(db_session)
        course = await service.create_course("CS304", "Web", CourseType.ELECTIVE, 10, 5, faculty_ids=[faculty_id])
        await service.register_course(student_id, course.id)

        await service.delete_course(course.id)

        assert await course_count(db_session) == 0
        assert await faculty_load(db_session, faculty_id) == 0
        remaining = await db_session.execute(select(func.count()).select_from(course_enrollments))
        assert remaining.scalar_one() == 0


class TestRegistration:
    """Students register for and drop electives"""

    async def test_register_takes_a_seat_on_both_sides(self, db_session, make_course, student):
        course = await make_course(seat_limit=10)
        service = EnrollmentService(db_session)

        updated = await service.register_course(student.id, course.id)

        assert updated.seats_filled == 1
        assert [s.id for s in updated.students] == [student.id]
        refreshed = await IdentityService(db_session).get_principal("student", student.id)
        assert [c.id for c in refreshed.elective_courses] == [course.id]

    async def test_last_seat_goes_to_one_student(self, db_session, make_course, make_student):
        """Two students, one seat: the second is turned away"""
        course = await make_course(code="CS304", seat_limit=1)
        first = await make_student()
        second = await make_student()
        course_id, first_id, second_id = course.id, first.id, second.id
        service = EnrollmentService(db_session)

        await service.register_course(first_id, course_id)
        with pytest.raises(CapacityExceededError):
            await service.register_course(second_id, course_id)

        reloaded = await service.get_course(course_id)
        assert reloaded.seats_filled == 1
        assert [s.id for s in reloaded.students] == [first_id]

    async def test_unknown_student_not_found(self, db_session, make_course):
        course = await make_course()
        course_id = course.id
        service = EnrollmentService(db_session)

        with pytest.raises(NotFoundError):
            await service.register_course("7c0e4f0e-0000-4000-8000-000000000000", course_id)

        assert (await service.get_course(course_id)).seats_filled == 0

    async def test_register_twice_rejected(self, db_session, make_course, student):
        course = await make_course()
        course_id, student_id = course.id, student.id
        service = EnrollmentService(db_session)
        await service.register_course(student_id, course_id)

        with pytest.raises(AlreadyRegisteredError):
            await service.register_course(student_id, course_id)

        assert (await service.get_course(course_id)).seats_filled == 1

    async def test_core_course_not_registrable(self, db_session, make_course, student):
        course = await make_course(course_type=CourseType.CORE)

        with pytest.raises(InvalidStateError):
            await EnrollmentService(db_session).register_course(student.id, course.id)

    async def test_unknown_course(self, db_session, student):
        with pytest.raises(NotFoundError):
            await EnrollmentService(db_session).register_course(
                student.id, "7c0e4f0e-0000-4000-8000-000000000000"
            )

    async def test_drop_frees_the_seat(self, db_session, make_course, student):
        course = await make_course(seat_limit=1)
        service = EnrollmentService(db_session)
        await service.register_course(student.id, course.id)

        updated = await service.drop_course(student.id, course.id)

        assert updated.seats_filled == 0
        assert updated.students == []
        refreshed = await IdentityService(db_session).get_principal("student", student.id)
        assert refreshed.courses == []

    async def test_drop_when_not_registered_is_a_no_op(self, db_session, make_course, student):
        course = await make_course()

        updated = await EnrollmentService(db_session).drop_course(student.id, course.id)

        assert updated.seats_filled == 0

    async def test_core_course_cannot_be_dropped(self, db_session, make_course, student):
        course = await make_course(course_type=CourseType.CORE)
        course_id, student_id = course.id, student.id
        service = EnrollmentService(db_session)
        await service.assign_core_course(student_id, course_id)

        with pytest.raises(InvalidStateError):
            await service.drop_course(student_id, course_id)

        assert [s.id for s in (await service.get_course(course_id)).students] == [student_id]


class TestCoreAssignment:

    async def test_assign_leaves_seat_counter(self, db_session, make_course, student):
        course = await make_course(course_type=CourseType.CORE, seat_limit=60)

        updated = await EnrollmentService(db_session).assign_core_course(student.id, course.id)

        assert updated.seats_filled == 0
        assert [s.id for s in updated.students] == [student.id]

    async def test_assign_elective_rejected(self, db_session, make_course, student):
        course = await make_course(course_type=CourseType.ELECTIVE)

        with pytest.raises(InvalidStateError):
            await EnrollmentService(db_session).assign_core_course(student.id, course.id)

    async def test_assign_twice_rejected(self, db_session, make_course, student):
        course = await make_course(course_type=CourseType.CORE)
        course_id, student_id = course.id, student.id
        service = EnrollmentService(db_session)
        await service.assign_core_course(student_id, course_id)

        with pytest.raises(AlreadyRegisteredError):
            await service.assign_core_course(student_id, course_id)


class TestReads:

    async def test_available_electives_filter(self, db_session, make_course, make_student):
        student = await make_student(department="Computer Science")
        open_elective = await make_course(seat_limit=5)
        await make_course(seat_limit=1, seats_filled=1)
        await make_course(course_type=CourseType.CORE)
        await make_course(department="Electronics")

        electives = await EnrollmentService(db_session).list_available_electives(student.id)

        assert [c.id for c in electives] == [open_elective.id]

    async def test_faculty_sees_only_allocated_course(self, db_session, make_faculty):
        owner = await make_faculty()
        other = await make_faculty()
        other_id = other.id
        service = EnrollmentService(db_session)
        course = await service.create_course("CS301", "DS", CourseType.CORE, 60, 3, faculty_ids=[owner.id])
        course_id = course.id

        assert (await service.get_course_for_faculty(owner.id, course_id)).id == course_id
        assert [c.id for c in await service.list_faculty_courses(owner.id)] == [course_id]
        with pytest.raises(ForbiddenError):
            await service.get_course_for_faculty(other_id, course_id)
