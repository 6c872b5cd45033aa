"""
Unit Tests for IdentityService - signup, login, profiles and statistics
"""
import pytest

from auxia.core.exceptions import DuplicateKeyError, UnauthorizedError, ValidationError
from auxia.core.security import decode_token
from auxia.services.identity_service import IdentityService, ACCOUNT_HANDLERS, get_account_handler


STUDENT_DATA = {
    "name": "John Doe",
    "usn": "1CS22CS001",
    "semester": 3,
    "college_email": "john.doe@auxia.edu",
    "department": "Computer Science",
    "interests": ["Web Development"],
    "password": "student123",
}

FACULTY_DATA = {
    "name": "Dr. Sarah Wilson",
    "faculty_id": "FAC001",
    "email": "sarah.wilson@auxia.edu",
    "department": "Computer Science",
    "password": "faculty123",
}


class TestAccountHandlers:

    def test_every_role_registered(self):
        assert set(ACCOUNT_HANDLERS) == {"student", "faculty", "admin", "club"}

    def test_unknown_role(self):
        with pytest.raises(ValidationError):
            get_account_handler("dean")


class TestSignup:

    async def test_student_signup_issues_token(self, db_session):
        student, token = await IdentityService(db_session).signup("student", dict(STUDENT_DATA))

        assert student.usn == "1CS22CS001"
        assert student.hashed_password != "student123"
        payload = decode_token(token)
        assert payload["sub"] == student.id
        assert payload["role"] == "student"

    async def test_faculty_starts_with_no_load(self, db_session):
        faculty, _ = await IdentityService(db_session).signup("faculty", dict(FACULTY_DATA))

        assert faculty.course_load == 0

    async def test_duplicate_usn_rejected(self, db_session):
        service = IdentityService(db_session)
        await service.signup("student", dict(STUDENT_DATA))

        with pytest.raises(DuplicateKeyError) as exc_info:
            await service.signup("student", {**STUDENT_DATA, "college_email": "other@auxia.edu"})

        assert exc_info.value.details["field"] == "USN"

    async def test_duplicate_club_name_rejected(self, db_session):
        service = IdentityService(db_session)
        await service.signup("club", {"name": "Tech Club", "password": "club123"})

        with pytest.raises(DuplicateKeyError):
            await service.signup("club", {"name": "Tech Club", "password": "club456"})

    async def test_admin_cannot_create_clubs(self, db_session):
        with pytest.raises(ValidationError):
            await IdentityService(db_session).create_user("club", {"name": "X", "password": "club123"})


class TestLogin:

    async def test_student_logs_in_with_college_email(self, db_session):
        service = IdentityService(db_session)
        created, _ = await service.signup("student", dict(STUDENT_DATA))

        student, token = await service.login("student", "john.doe@auxia.edu", "student123")

        assert student.id == created.id
        assert decode_token(token)["role"] == "student"

    async def test_club_logs_in_with_name(self, db_session):
        service = IdentityService(db_session)
        await service.signup("club", {"name": "Tech Club", "password": "club123"})

        club, _ = await service.login("club", "Tech Club", "club123")

        assert club.name == "Tech Club"

    async def test_wrong_password(self, db_session):
        service = IdentityService(db_session)
        await service.signup("faculty", dict(FACULTY_DATA))

        with pytest.raises(UnauthorizedError):
            await service.login("faculty", "sarah.wilson@auxia.edu", "wrong")

    async def test_wrong_role(self, db_session):
        """A student's credentials do not log in as faculty"""
        service = IdentityService(db_session)
        await service.signup("student", dict(STUDENT_DATA))

        with pytest.raises(UnauthorizedError):
            await service.login("faculty", "john.doe@auxia.edu", "student123")


class TestProfiles:

    async def test_only_editable_fields_change(self, db_session, student):
        original_usn = student.usn

        updated = await IdentityService(db_session).update_profile(
            "student", student.id, {"name": "New Name", "usn": "1CS22CS999", "phone": None},
        )

        assert updated.name == "New Name"
        assert updated.usn == original_usn

    async def test_club_rename_must_stay_unique(self, db_session, make_club):
        await make_club(name="Coding Club")
        club = await make_club(name="Tech Club")
        club_id = club.id

        with pytest.raises(DuplicateKeyError):
            await IdentityService(db_session).update_profile("club", club_id, {"name": "Coding Club"})

    async def test_get_principal_wrong_role_is_none(self, db_session, student):
        assert await IdentityService(db_session).get_principal("faculty", student.id) is None
        assert await IdentityService(db_session).get_principal("student", "garbage") is None


class TestStats:

    async def test_counts_each_role(self, db_session, student, faculty, admin, club, make_student):
        await make_student()

        stats = await IdentityService(db_session).user_stats()

        assert stats == {"students": 2, "faculty": 1, "admins": 1, "clubs": 1}
