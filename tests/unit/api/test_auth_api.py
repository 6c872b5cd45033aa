"""
Unit Tests for Auth API Endpoints
Tests for: per-role signup, login, bearer-token guards
"""
import pytest
from httpx import AsyncClient
from faker import Faker

fake = Faker()


def student_signup_body(**overrides):
    body = {
        "name": fake.name(),
        "usn": "1CS22CS001",
        "semester": 3,
        "college_email": "john.doe@auxia.edu",
        "personal_email": "john.doe@gmail.com",
        "phone": "9876543210",
        "department": "Computer Science",
        "interests": ["Web Development"],
        "password": "student123",
    }
    body.update(overrides)
    return body


class TestSignup:
    """Test signup endpoints"""

    async def test_student_signup(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/student/signup", json=student_signup_body())

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Student registered successfully"
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "student"
        assert data["user"]["usn"] == "1CS22CS001"
        assert "password" not in data["user"]

    async def test_duplicate_usn(self, client: AsyncClient):
        await client.post("/api/v1/auth/student/signup", json=student_signup_body())

        response = await client.post(
            "/api/v1/auth/student/signup",
            json=student_signup_body(college_email="someone.else@auxia.edu"),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "DUPLICATE_KEY"

    async def test_invalid_usn_is_422(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/student/signup", json=student_signup_body(usn="abc"))

        assert response.status_code == 422

    async def test_faculty_signup(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/faculty/signup", json={
            "name": "Dr. Sarah Wilson",
            "faculty_id": "FAC001",
            "email": "sarah.wilson@auxia.edu",
            "department": "Computer Science",
            "areas_of_expertise": ["Machine Learning"],
            "password": "faculty123",
        })

        assert response.status_code == 201
        assert response.json()["user"]["faculty_id"] == "FAC001"

    async def test_admin_signup(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/admin/signup", json={
            "name": "Admin User",
            "admin_id": "ADM001",
            "email": "admin@auxia.edu",
            "password": "admin123",
        })

        assert response.status_code == 201
        assert response.json()["user"]["admin_id"] == "ADM001"

    async def test_club_signup(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/club/signup", json={
            "name": "Tech Club",
            "description": "Technology enthusiasts",
            "password": "club123",
        })

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "club"

    async def test_unknown_role_route(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/dean/signup", json={})

        assert response.status_code == 404


class TestLogin:
    """Test login endpoint"""

    async def test_login_success(self, client: AsyncClient):
        await client.post("/api/v1/auth/student/signup", json=student_signup_body())

        response = await client.post("/api/v1/auth/login", json={
            "email": "john.doe@auxia.edu", "password": "student123", "role": "student",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["token"]

    async def test_club_login_by_name(self, client: AsyncClient):
        await client.post("/api/v1/auth/club/signup", json={"name": "Tech Club", "password": "club123"})

        response = await client.post("/api/v1/auth/login", json={
            "email": "Tech Club", "password": "club123", "role": "club",
        })

        assert response.status_code == 200

    async def test_login_invalid_credentials(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={
            "email": "nobody@auxia.edu", "password": "wrong", "role": "faculty",
        })

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_token_from_login_opens_profile(self, client: AsyncClient):
        await client.post("/api/v1/auth/student/signup", json=student_signup_body())
        login = await client.post("/api/v1/auth/login", json={
            "email": "john.doe@auxia.edu", "password": "student123", "role": "student",
        })

        response = await client.get(
            "/api/v1/student/profile",
            headers={"Authorization": f"Bearer {login.json()['token']}"},
        )

        assert response.status_code == 200
        assert response.json()["usn"] == "1CS22CS001"


class TestGuards:
    """Bearer token and role checks"""

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/student/profile")

        assert response.status_code == 401

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/v1/student/profile", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    async def test_wrong_role(self, client: AsyncClient, student_headers):
        response = await client.get("/api/v1/admin/courses", headers=student_headers)

        assert response.status_code == 403

    async def test_token_for_deleted_principal(self, client: AsyncClient, headers_for):
        class Ghost:
            id = "7c0e4f0e-0000-4000-8000-000000000000"

        response = await client.get("/api/v1/faculty/profile", headers=headers_for(Ghost, "faculty"))

        assert response.status_code == 401

    async def test_role_claim_must_match_table(self, client: AsyncClient, student, headers_for):
        """A student id presented with the admin role finds no admin"""
        response = await client.get("/api/v1/admin/profile", headers=headers_for(student, "admin"))

        assert response.status_code == 401
