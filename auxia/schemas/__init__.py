# Pydantic schemas
from auxia.schemas.common import (
    StudentSummary,
    FacultySummary,
    CourseSummary,
    ClubSummary,
    MessageResponse,
)
from auxia.schemas.auth import (
    StudentSignup,
    FacultySignup,
    AdminSignup,
    ClubSignup,
    LoginRequest,
    PrincipalInfo,
    AuthResponse,
)
from auxia.schemas.course import (
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    CourseMutationResponse,
    CourseSelection,
    CoreStudentAssignment,
)
from auxia.schemas.gradesheet import (
    GradesheetGenerate,
    MarksUpload,
    BulkMarksUpload,
    GradesheetResponse,
    GradesheetAdminView,
    GradesheetMutationResponse,
    BulkMarksResponse,
)
