"""
Unit Tests for Admin API Endpoints
Tests for: courses and allocation, accounts, gradesheets, feedback stats,
announcements
"""
import pytest
from httpx import AsyncClient

from auxia.models import CourseType
from auxia.services.feedback_service import FeedbackService


def course_body(**overrides):
    body = {
        "code": "CS301",
        "name": "Data Structures and Algorithms",
        "department": "Computer Science",
        "course_type": "core",
        "seat_limit": 60,
        "semester": 3,
        "faculty_ids": [],
    }
    body.update(overrides)
    return body


class TestAdminProfile:

    async def test_get_and_update(self, client: AsyncClient, admin_headers):
        response = await client.put("/api/v1/admin/profile", json={"phone": "9876543300"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["phone"] == "9876543300"
        assert "hashed_password" not in response.json()


class TestCourses:

    async def test_create_course_with_faculty(self, client: AsyncClient, admin_headers, faculty):
        response = await client.post(
            "/api/v1/admin/courses", json=course_body(faculty_ids=[faculty.id]), headers=admin_headers,
        )

        assert response.status_code == 201
        course = response.json()["course"]
        assert course["seats_filled"] == 0
        assert [f["id"] for f in course["faculty"]] == [faculty.id]

    async def test_fourth_course_for_faculty_rejected(self, client: AsyncClient, admin_headers, faculty):
        faculty_id = faculty.id
        for n in range(3):
            await client.post(
                "/api/v1/admin/courses",
                json=course_body(code=f"CS30{n}", faculty_ids=[faculty_id]),
                headers=admin_headers,
            )

        response = await client.post(
            "/api/v1/admin/courses", json=course_body(code="CS309", faculty_ids=[faculty_id]), headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CAPACITY_EXCEEDED"
        listing = await client.get("/api/v1/admin/courses", headers=admin_headers)
        assert [c["code"] for c in listing.json()] == ["CS300", "CS301", "CS302"]

    async def test_duplicate_code(self, client: AsyncClient, admin_headers):
        await client.post("/api/v1/admin/courses", json=course_body(), headers=admin_headers)

        response = await client.post("/api/v1/admin/courses", json=course_body(), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DUPLICATE_KEY"

    async def test_update_course(self, client: AsyncClient, admin_headers, make_course):
        course = await make_course()

        response = await client.put(
            f"/api/v1/admin/courses/{course.id}", json={"name": "Renamed", "seat_limit": 45}, headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["course"]["name"] == "Renamed"
        assert response.json()["course"]["seat_limit"] == 45

    async def test_update_unknown_course(self, client: AsyncClient, admin_headers):
        response = await client.put(
            "/api/v1/admin/courses/7c0e4f0e-0000-4000-8000-000000000000", json={"name": "x"}, headers=admin_headers,
        )

        assert response.status_code == 404

    async def test_delete_course(self, client: AsyncClient, admin_headers, make_course):
        course = await make_course()

        response = await client.delete(f"/api/v1/admin/courses/{course.id}", headers=admin_headers)

        assert response.status_code == 200
        assert (await client.get("/api/v1/admin/courses", headers=admin_headers)).json() == []

    async def test_assign_core_student(self, client: AsyncClient, admin_headers, make_course, student):
        course = await make_course(course_type=CourseType.CORE)

        response = await client.post(
            f"/api/v1/admin/courses/{course.id}/core-students",
            json={"student_id": student.id},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert [s["id"] for s in response.json()["course"]["students"]] == [student.id]


class TestAccounts:

    async def test_create_faculty_account(self, client: AsyncClient, admin_headers):
        response = await client.post("/api/v1/admin/users", json={
            "user_type": "faculty",
            "data": {
                "name": "Prof. Robert Chen",
                "faculty_id": "FAC002",
                "email": "robert.chen@auxia.edu",
                "department": "Computer Science",
                "password": "faculty123",
            },
        }, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["message"] == "Faculty created successfully"
        assert response.json()["user"]["faculty_id"] == "FAC002"

    async def test_invalid_account_data(self, client: AsyncClient, admin_headers):
        response = await client.post("/api/v1/admin/users", json={
            "user_type": "student",
            "data": {"name": "No USN"},
        }, headers=admin_headers)

        assert response.status_code == 422

    async def test_user_stats(self, client: AsyncClient, admin_headers, student, faculty, club):
        response = await client.get("/api/v1/admin/users/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["stats"] == {"students": 1, "faculty": 1, "admins": 1, "clubs": 1}

    async def test_list_students_and_faculty(self, client: AsyncClient, admin_headers, student, faculty):
        students = await client.get("/api/v1/admin/students", headers=admin_headers)
        faculty_list = await client.get("/api/v1/admin/faculty", headers=admin_headers)

        assert [s["usn"] for s in students.json()] == [student.usn]
        assert [f["faculty_id"] for f in faculty_list.json()] == [faculty.faculty_id]
        assert faculty_list.json()[0]["course_load"] == 0


class TestGradesheets:

    async def test_generate_release_list(self, client: AsyncClient, admin_headers, student):
        generated = await client.post(
            "/api/v1/admin/gradesheets/generate",
            json={"student_id": student.id, "semester": 3},
            headers=admin_headers,
        )
        assert generated.status_code == 201
        sheet = generated.json()["gradesheet"]
        assert sheet["released"] is False

        released = await client.put(f"/api/v1/admin/gradesheets/{sheet['id']}/release", headers=admin_headers)
        assert released.json()["gradesheet"]["released"] is True

        listing = await client.get("/api/v1/admin/gradesheets", headers=admin_headers)
        assert listing.json()[0]["student"]["usn"] == student.usn

    async def test_generate_twice(self, client: AsyncClient, admin_headers, student):
        body = {"student_id": student.id, "semester": 3}
        await client.post("/api/v1/admin/gradesheets/generate", json=body, headers=admin_headers)

        response = await client.post("/api/v1/admin/gradesheets/generate", json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"


class TestFeedbackStats:

    async def test_stats(self, client: AsyncClient, admin_headers, db_session, student, faculty, make_course):
        course = await make_course()
        await FeedbackService(db_session).submit_feedback(student.id, faculty.id, "Great", course_id=course.id)

        response = await client.get("/api/v1/admin/feedback/stats", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_feedbacks"] == 1
        entry = data["faculty_stats"][faculty.id]
        assert entry["faculty"]["faculty_id"] == faculty.faculty_id
        assert entry["courses"][course.id]["feedback_count"] == 1


class TestAnnouncements:

    async def test_create_list_delete(self, client: AsyncClient, admin_headers):
        created = await client.post(
            "/api/v1/admin/announcements",
            json={"title": "Welcome", "description": "New semester", "target_audience": "Students"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        announcement = created.json()["announcement"]
        assert announcement["created_by"] == "Admin"
        assert announcement["target_audience"] == "Students"

        listing = await client.get("/api/v1/admin/announcements", headers=admin_headers)
        assert [a["id"] for a in listing.json()] == [announcement["id"]]

        deleted = await client.delete(f"/api/v1/admin/announcements/{announcement['id']}", headers=admin_headers)
        assert deleted.status_code == 200

    async def test_blank_title(self, client: AsyncClient, admin_headers):
        response = await client.post("/api/v1/admin/announcements", json={"title": "  "}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"field": "title"}
