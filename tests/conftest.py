"""
Auxia - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_auxia.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['BCRYPT_ROUNDS'] = '4'

from auxia.main import app
from auxia.core.database import Base, get_db, enable_sqlite_foreign_keys
from auxia.core.security import get_password_hash, create_access_token
from auxia.models import Student, Faculty, Admin, Club, Course, CourseType

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_auxia.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
enable_sqlite_foreign_keys(test_engine)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    fake.unique.clear()
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== Factories ====================

@pytest.fixture
def make_student(db_session: AsyncSession):
    """Build and commit a Student; keyword overrides win"""
    async def _make(**overrides) -> Student:
        n = fake.unique.random_int(min=1, max=999)
        fields = dict(
            name=fake.name(),
            usn=f"1CS22CS{n:03d}",
            semester=3,
            college_email=f"student{n}@auxia.edu",
            department="Computer Science",
            interests=[],
            hashed_password=get_password_hash('student123'),
        )
        fields.update(overrides)
        student = Student(**fields)
        db_session.add(student)
        await db_session.commit()
        return student
    return _make


@pytest.fixture
def make_faculty(db_session: AsyncSession):
    async def _make(**overrides) -> Faculty:
        n = fake.unique.random_int(min=1, max=999)
        fields = dict(
            name=fake.name(),
            faculty_id=f"FAC{n:03d}",
            email=f"faculty{n}@auxia.edu",
            department="Computer Science",
            areas_of_expertise=[],
            course_load=0,
            hashed_password=get_password_hash('faculty123'),
        )
        fields.update(overrides)
        faculty = Faculty(**fields)
        db_session.add(faculty)
        await db_session.commit()
        return faculty
    return _make


@pytest.fixture
def make_course(db_session: AsyncSession):
    """Unallocated course with no students"""
    async def _make(**overrides) -> Course:
        n = fake.unique.random_int(min=100, max=999)
        fields = dict(
            code=f"CS{n}",
            name=fake.catch_phrase(),
            department="Computer Science",
            course_type=CourseType.ELECTIVE,
            seat_limit=30,
            seats_filled=0,
            semester=5,
        )
        fields.update(overrides)
        course = Course(**fields)
        db_session.add(course)
        await db_session.commit()
        return course
    return _make


@pytest.fixture
def make_club(db_session: AsyncSession):
    async def _make(**overrides) -> Club:
        fields = dict(
            name=f"{fake.unique.word().capitalize()} Club",
            description=fake.sentence(),
            hashed_password=get_password_hash('club123'),
        )
        fields.update(overrides)
        club = Club(**fields)
        db_session.add(club)
        await db_session.commit()
        return club
    return _make


# ==================== Principals ====================

@pytest.fixture
async def student(make_student) -> Student:
    return await make_student()


@pytest.fixture
async def faculty(make_faculty) -> Faculty:
    return await make_faculty()


@pytest.fixture
async def club(make_club) -> Club:
    return await make_club()


@pytest.fixture
async def admin(db_session: AsyncSession) -> Admin:
    admin = Admin(
        name=fake.name(),
        admin_id="ADM001",
        email="admin@auxia.edu",
        hashed_password=get_password_hash('admin123'),
    )
    db_session.add(admin)
    await db_session.commit()
    return admin


def bearer(principal, role: str) -> dict:
    """Authorization header for a principal acting as `role`"""
    return {'Authorization': f'Bearer {create_access_token(principal.id, role)}'}


@pytest.fixture
def student_headers(student: Student) -> dict:
    return bearer(student, 'student')


@pytest.fixture
def faculty_headers(faculty: Faculty) -> dict:
    return bearer(faculty, 'faculty')


@pytest.fixture
def admin_headers(admin: Admin) -> dict:
    return bearer(admin, 'admin')


@pytest.fixture
def club_headers(club: Club) -> dict:
    return bearer(club, 'club')


@pytest.fixture
def headers_for():
    """Factory fixture: headers_for(principal, role)"""
    return bearer


@pytest.fixture
def session_factory(db_session: AsyncSession):
    """Independent sessions on the test database, for tests that race two requests"""
    return TestSessionLocal
