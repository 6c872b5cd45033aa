# API endpoints
from . import auth, admin, student, faculty, club, health

__all__ = ["auth", "admin", "student", "faculty", "club", "health"]
