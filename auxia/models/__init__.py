# Re-export all models for convenient imports
from auxia.models.course import Course, CourseType, course_faculty, course_enrollments
from auxia.models.club import (
    Club, ClubEvent, ClubProject, EventType,
    club_memberships, project_members, project_requests,
)
from auxia.models.feedback import Feedback, student_feedbacks
from auxia.models.student import Student
from auxia.models.faculty import Faculty
from auxia.models.admin import Admin
from auxia.models.gradesheet import Gradesheet, GradeEntry
from auxia.models.announcement import Announcement, AnnouncementAuthor, TargetAudience

__all__ = [
    # Principals
    "Student",
    "Faculty",
    "Admin",
    "Club",
    # Courses
    "Course",
    "CourseType",
    "course_faculty",
    "course_enrollments",
    # Clubs
    "ClubEvent",
    "ClubProject",
    "EventType",
    "club_memberships",
    "project_members",
    "project_requests",
    # Grades
    "Gradesheet",
    "GradeEntry",
    # Feedback & announcements
    "Feedback",
    "student_feedbacks",
    "Announcement",
    "AnnouncementAuthor",
    "TargetAudience",
]
