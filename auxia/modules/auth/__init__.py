# Authentication module

from auxia.modules.auth.dependencies import (
    get_current_principal,
    require_role,
    get_current_student,
    get_current_faculty,
    get_current_admin,
    get_current_club,
)

__all__ = [
    "get_current_principal",
    "require_role",
    "get_current_student",
    "get_current_faculty",
    "get_current_admin",
    "get_current_club",
]
