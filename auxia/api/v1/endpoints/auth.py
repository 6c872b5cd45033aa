from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.database import get_db
from auxia.core.rate_limiter import limiter, LOGIN_LIMIT, SIGNUP_LIMIT
from auxia.schemas.auth import (
    StudentSignup,
    FacultySignup,
    AdminSignup,
    ClubSignup,
    LoginRequest,
    AuthResponse,
)
from auxia.services.identity_service import IdentityService

router = APIRouter()


async def _signup(db: AsyncSession, role: str, data: dict, message: str) -> AuthResponse:
    service = IdentityService(db)
    principal, token = await service.signup(role, data)
    return AuthResponse(message=message, token=token, user=service.public_view(role, principal))


@router.post("/student/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SIGNUP_LIMIT)
async def student_signup(
    request: Request,
    payload: StudentSignup,
    db: AsyncSession = Depends(get_db)
):
    """Register a student (USN and college email must be unused)"""
    return await _signup(db, "student", payload.model_dump(), "Student registered successfully")


@router.post("/faculty/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SIGNUP_LIMIT)
async def faculty_signup(
    request: Request,
    payload: FacultySignup,
    db: AsyncSession = Depends(get_db)
):
    """Register a faculty member"""
    return await _signup(db, "faculty", payload.model_dump(), "Faculty registered successfully")


@router.post("/admin/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SIGNUP_LIMIT)
async def admin_signup(
    request: Request,
    payload: AdminSignup,
    db: AsyncSession = Depends(get_db)
):
    return await _signup(db, "admin", payload.model_dump(), "Admin registered successfully")


@router.post("/club/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SIGNUP_LIMIT)
async def club_signup(
    request: Request,
    payload: ClubSignup,
    db: AsyncSession = Depends(get_db)
):
    return await _signup(db, "club", payload.model_dump(), "Club registered successfully")


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Log in as any role.

    Students use their college email, faculty and admins their email,
    clubs their name.
    """
    service = IdentityService(db)
    principal, token = await service.login(payload.role, payload.email, payload.password)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=service.public_view(payload.role, principal),
    )
