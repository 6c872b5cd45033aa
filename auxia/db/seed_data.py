"""
Database Seed Data Module

Sample students, faculty, an admin, clubs, courses, events, projects and
announcements. Everything goes through the services so seat counters,
course loads and relation tables stay consistent.

Run with: python -m auxia.db.seed_data
          python -m auxia.db.seed_data clear
"""
import asyncio
import sys
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import text

from auxia.core.database import AsyncSessionLocal, init_db
from auxia.models.announcement import AnnouncementAuthor, TargetAudience
from auxia.models.club import Club, EventType
from auxia.models.course import Course, CourseType
from auxia.models.faculty import Faculty
from auxia.models.student import Student
from auxia.services.announcement_service import AnnouncementService
from auxia.services.enrollment_service import EnrollmentService
from auxia.services.identity_service import IdentityService
from auxia.services.membership_service import MembershipService


# ==================== Sample Data Constants ====================

DEFAULT_PASSWORDS = {
    "student": "student123",
    "faculty": "faculty123",
    "admin": "admin123",
    "club": "club123",
}

SAMPLE_STUDENTS = [
    {
        "name": "John Doe", "usn": "1CS22CS001", "semester": 3,
        "college_email": "john.doe@auxia.edu", "personal_email": "john.doe@gmail.com",
        "phone": "9876543210", "department": "Computer Science", "cgpa": 8.5,
        "interests": ["Web Development", "Machine Learning", "Data Science"],
    },
    {
        "name": "Jane Smith", "usn": "1CS22CS002", "semester": 3,
        "college_email": "jane.smith@auxia.edu", "personal_email": "jane.smith@gmail.com",
        "phone": "9876543211", "department": "Computer Science", "cgpa": 9.2,
        "interests": ["Artificial Intelligence", "Robotics", "Computer Vision"],
    },
    {
        "name": "Mike Johnson", "usn": "1EC22EC001", "semester": 5,
        "college_email": "mike.johnson@auxia.edu", "personal_email": "mike.johnson@gmail.com",
        "phone": "9876543212", "department": "Electronics", "cgpa": 8.8,
        "interests": ["Embedded Systems", "IoT", "Signal Processing"],
    },
]

SAMPLE_FACULTY = [
    {
        "name": "Dr. Sarah Wilson", "faculty_id": "FAC001", "email": "sarah.wilson@auxia.edu",
        "phone": "9876543220", "department": "Computer Science",
        "areas_of_expertise": ["Machine Learning", "Data Mining", "Statistics"],
    },
    {
        "name": "Prof. Robert Chen", "faculty_id": "FAC002", "email": "robert.chen@auxia.edu",
        "phone": "9876543221", "department": "Computer Science",
        "areas_of_expertise": ["Web Development", "Database Systems", "Software Engineering"],
    },
    {
        "name": "Dr. Emily Brown", "faculty_id": "FAC003", "email": "emily.brown@auxia.edu",
        "phone": "9876543222", "department": "Electronics",
        "areas_of_expertise": ["Digital Electronics", "Microprocessors", "VLSI Design"],
    },
]

SAMPLE_ADMINS = [
    {"name": "Admin User", "admin_id": "ADM001", "email": "admin@auxia.edu", "phone": "9876543300"},
]

SAMPLE_CLUBS = [
    {"name": "Tech Club", "description": "A club for technology enthusiasts to collaborate on projects and learn new skills."},
    {"name": "Coding Club", "description": "Focused on programming competitions, hackathons, and coding challenges."},
    {"name": "Robotics Club", "description": "Building robots, participating in competitions, and learning automation."},
]

SAMPLE_COURSES = [
    {"code": "CS301", "name": "Data Structures and Algorithms", "department": "Computer Science",
     "course_type": CourseType.CORE, "seat_limit": 60, "semester": 3},
    {"code": "CS302", "name": "Database Management Systems", "department": "Computer Science",
     "course_type": CourseType.CORE, "seat_limit": 60, "semester": 3},
    {"code": "CS303", "name": "Machine Learning", "department": "Computer Science",
     "course_type": CourseType.ELECTIVE, "seat_limit": 40, "semester": 5},
    {"code": "CS304", "name": "Web Development", "department": "Computer Science",
     "course_type": CourseType.ELECTIVE, "seat_limit": 35, "semester": 5},
    {"code": "EC301", "name": "Digital Electronics", "department": "Electronics",
     "course_type": CourseType.CORE, "seat_limit": 50, "semester": 5},
]

SAMPLE_ANNOUNCEMENTS = [
    {"title": "Welcome to New Semester",
     "description": "Welcome back students! We hope you had a great break. New semester starts from tomorrow.",
     "created_by": AnnouncementAuthor.ADMIN, "target_audience": TargetAudience.ALL},
    {"title": "Hackathon Registration Open",
     "description": "Annual coding hackathon registration is now open. Register your teams by next Friday.",
     "created_by": AnnouncementAuthor.CLUB, "target_audience": TargetAudience.STUDENTS},
    {"title": "Faculty Meeting",
     "description": "All faculty members are requested to attend the monthly meeting this Friday at 3 PM.",
     "created_by": AnnouncementAuthor.ADMIN, "target_audience": TargetAudience.ALL},
]


# ==================== Seeders ====================

async def seed_principals(db, role: str, rows: List[dict]) -> list:
    service = IdentityService(db)
    created = []
    for row in rows:
        principal, _ = await service.signup(role, {**row, "password": DEFAULT_PASSWORDS[role]})
        created.append(principal)
    print(f"Created {len(created)} {role} accounts")
    return created


async def seed_courses(db, faculty: List[Faculty]) -> List[Course]:
    """Course i is taught by faculty i mod len(faculty)"""
    service = EnrollmentService(db)
    courses = []
    for index, row in enumerate(SAMPLE_COURSES):
        lecturer = faculty[index % len(faculty)]
        courses.append(await service.create_course(**row, faculty_ids=[lecturer.id]))
    print(f"Created {len(courses)} courses")
    return courses


async def seed_core_assignments(db, students: List[Student], courses: List[Course]) -> int:
    """Every student takes the core courses of their own department"""
    service = EnrollmentService(db)
    count = 0
    for student in students:
        for course in courses:
            if course.course_type == CourseType.CORE and course.department == student.department:
                await service.assign_core_course(student.id, course.id)
                count += 1
    print(f"Assigned {count} core course seats")
    return count


async def seed_club_activity(db, clubs: List[Club]) -> None:
    service = MembershipService(db)
    now = datetime.utcnow()

    await service.create_event(
        clubs[0].id, "Tech Talk: AI in 2024", EventType.OPEN,
        description="Join us for an exciting talk on the latest developments in AI",
        date=now + timedelta(days=7),
    )
    await service.create_event(
        clubs[1].id, "Coding Competition", EventType.OPEN,
        description="Monthly coding competition for all students",
        date=now + timedelta(days=3),
    )
    await service.create_project(
        clubs[0].id, "Smart Attendance System",
        "AI-powered attendance system using facial recognition",
    )
    await service.create_project(
        clubs[2].id, "Line Following Robot",
        "Autonomous robot that follows lines and avoids obstacles",
    )
    print("Created 2 events and 2 projects")


async def seed_announcements(db, admin, clubs: List[Club]) -> None:
    service = AnnouncementService(db)
    for row in SAMPLE_ANNOUNCEMENTS:
        if row["created_by"] == AnnouncementAuthor.CLUB:
            await service.create_announcement(**row, club_id=clubs[0].id, author_id=clubs[0].id)
        else:
            await service.create_announcement(**row, author_id=admin.id)
    print(f"Created {len(SAMPLE_ANNOUNCEMENTS)} announcements")


async def seed_all():
    """Seed all sample data"""
    print("=" * 50)
    print("Starting database seeding...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        students = await seed_principals(db, "student", SAMPLE_STUDENTS)
        faculty = await seed_principals(db, "faculty", SAMPLE_FACULTY)
        admins = await seed_principals(db, "admin", SAMPLE_ADMINS)
        clubs = await seed_principals(db, "club", SAMPLE_CLUBS)

        courses = await seed_courses(db, faculty)
        await seed_core_assignments(db, students, courses)
        await seed_club_activity(db, clubs)
        await seed_announcements(db, admins[0], clubs)

    print("=" * 50)
    print("Database seeding completed successfully!")
    print("Default passwords: " + ", ".join(f"{k}={v}" for k, v in DEFAULT_PASSWORDS.items()))
    print("=" * 50)


async def clear_all():
    """Clear all data from database"""
    print("Clearing all data...")
    async with AsyncSessionLocal() as db:
        # Delete in reverse order of dependencies
        for table in (
            "announcements", "student_feedbacks", "feedbacks", "grade_entries", "gradesheets",
            "project_requests", "project_members", "club_projects", "club_events",
            "club_memberships", "course_enrollments", "course_faculty", "courses",
            "clubs", "admins", "faculty", "students",
        ):
            await db.execute(text(f"DELETE FROM {table}"))
        await db.commit()
    print("All data cleared!")


def main():
    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all())


if __name__ == "__main__":
    main()
