from auxia.services.enrollment_service import EnrollmentService, get_enrollment_service
from auxia.services.gradesheet_service import (
    GradesheetService, get_gradesheet_service, calculate_grade,
)
from auxia.services.membership_service import MembershipService, get_membership_service
from auxia.services.announcement_service import AnnouncementService, get_announcement_service
from auxia.services.feedback_service import FeedbackService, get_feedback_service
from auxia.services.identity_service import (
    IdentityService, get_identity_service, AccountHandler, ACCOUNT_HANDLERS,
)

__all__ = [
    # Courses
    "EnrollmentService",
    "get_enrollment_service",
    # Grades
    "GradesheetService",
    "get_gradesheet_service",
    "calculate_grade",
    # Clubs
    "MembershipService",
    "get_membership_service",
    # Announcements & feedback
    "AnnouncementService",
    "get_announcement_service",
    "FeedbackService",
    "get_feedback_service",
    # Identity
    "IdentityService",
    "get_identity_service",
    "AccountHandler",
    "ACCOUNT_HANDLERS",
]
