"""
Identity Service
Signup, login, admin-created accounts, profiles and user statistics for
the four principal kinds.

Role-specific behaviour lives in one AccountHandler per role, looked up in
ACCOUNT_HANDLERS, so callers never branch on the role string.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.exceptions import DuplicateKeyError, UnauthorizedError, ValidationError
from auxia.core.logging_config import logger
from auxia.core.security import create_access_token, get_password_hash, verify_password
from auxia.core.types import is_valid_uuid
from auxia.models.admin import Admin
from auxia.models.club import Club
from auxia.models.faculty import Faculty
from auxia.models.student import Student
from auxia.schemas.auth import PrincipalInfo
from auxia.services.base import BaseService


class AccountHandler:
    """Role-specific rules for one principal model"""

    role: str = ""
    model: Type = None
    login_field: str = ""
    # (attribute, label) pairs that must be unique
    unique_fields: Tuple[Tuple[str, str], ...] = ()
    # Attributes the principal may change on its own profile
    editable_fields: Tuple[str, ...] = ()
    label: str = ""

    def build(self, data: Dict[str, Any]):
        fields = {k: v for k, v in data.items() if k != "password" and hasattr(self.model, k)}
        return self.model(**fields, hashed_password=get_password_hash(data["password"]))

    def public_view(self, principal) -> PrincipalInfo:
        return PrincipalInfo(id=principal.id, name=principal.name, role=self.role)

    async def ensure_unique(self, db: AsyncSession, data: Dict[str, Any], exclude_id: Optional[str] = None) -> None:
        for field, label in self.unique_fields:
            value = data.get(field)
            if value is None:
                continue
            query = select(self.model.id).where(getattr(self.model, field) == value)
            if exclude_id:
                query = query.where(self.model.id != exclude_id)
            if (await db.execute(query)).scalar_one_or_none() is not None:
                raise DuplicateKeyError(self.label, label, value)


class StudentAccounts(AccountHandler):
    role = "student"
    model = Student
    label = "Student"
    login_field = "college_email"
    unique_fields = (("usn", "USN"), ("college_email", "email"))
    editable_fields = ("name", "personal_email", "phone", "interests")

    def public_view(self, principal) -> PrincipalInfo:
        return PrincipalInfo(
            id=principal.id, name=principal.name, role=self.role,
            usn=principal.usn, semester=principal.semester, department=principal.department,
        )


class FacultyAccounts(AccountHandler):
    role = "faculty"
    model = Faculty
    label = "Faculty"
    login_field = "email"
    unique_fields = (("faculty_id", "ID"), ("email", "email"))
    editable_fields = ("name", "phone", "areas_of_expertise")

    def build(self, data: Dict[str, Any]):
        faculty = super().build(data)
        faculty.course_load = 0
        return faculty

    def public_view(self, principal) -> PrincipalInfo:
        return PrincipalInfo(
            id=principal.id, name=principal.name, role=self.role,
            faculty_id=principal.faculty_id, department=principal.department,
        )


class AdminAccounts(AccountHandler):
    role = "admin"
    model = Admin
    label = "Admin"
    login_field = "email"
    unique_fields = (("admin_id", "ID"), ("email", "email"))
    editable_fields = ("name", "phone")

    def public_view(self, principal) -> PrincipalInfo:
        return PrincipalInfo(id=principal.id, name=principal.name, role=self.role, admin_id=principal.admin_id)


class ClubAccounts(AccountHandler):
    role = "club"
    model = Club
    label = "Club"
    # Clubs log in with their name
    login_field = "name"
    unique_fields = (("name", "name"),)
    editable_fields = ("name", "description")


ACCOUNT_HANDLERS: Dict[str, AccountHandler] = {
    handler.role: handler
    for handler in (StudentAccounts(), FacultyAccounts(), AdminAccounts(), ClubAccounts())
}

# Roles an admin may create through /admin/users
ADMIN_CREATABLE_ROLES = ("student", "faculty", "admin")


def get_account_handler(role: str) -> AccountHandler:
    handler = ACCOUNT_HANDLERS.get(role)
    if handler is None:
        raise ValidationError(f"Invalid role: {role}", field="role")
    return handler


class IdentityService(BaseService):
    """Service for principals and credentials"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def get_principal(self, role: str, principal_id: str):
        """Principal by role and id, or None"""
        handler = ACCOUNT_HANDLERS.get(role)
        if handler is None or not is_valid_uuid(principal_id):
            return None
        result = await self.db.execute(
            select(handler.model)
            .where(handler.model.id == principal_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _create(self, handler: AccountHandler, data: Dict[str, Any]):
        def on_conflict():
            return DuplicateKeyError(handler.label, "key", None)

        async with self.transaction(on_conflict=on_conflict):
            await handler.ensure_unique(self.db, data)
            principal = handler.build(data)
            self.db.add(principal)

        logger.log_domain_event(handler.label, "created", principal.id)
        return principal

    async def signup(self, role: str, data: Dict[str, Any]) -> Tuple[Any, str]:
        """Create a principal and issue its token"""
        handler = get_account_handler(role)
        principal = await self._create(handler, data)
        logger.log_auth_event("signup", success=True, login=principal.name, account_role=role)
        return principal, create_access_token(principal.id, role)

    async def create_user(self, user_type: str, data: Dict[str, Any]):
        """Admin creates a student, faculty or admin account"""
        if user_type not in ADMIN_CREATABLE_ROLES:
            raise ValidationError("Invalid user type", field="user_type")
        return await self._create(get_account_handler(user_type), data)

    async def login(self, role: str, login: str, password: str) -> Tuple[Any, str]:
        handler = get_account_handler(role)
        result = await self.db.execute(
            select(handler.model).where(getattr(handler.model, handler.login_field) == login)
        )
        principal = result.scalar_one_or_none()

        if principal is None or not verify_password(password, principal.hashed_password):
            logger.log_auth_event("login", success=False, login=login, reason="invalid credentials", account_role=role)
            raise UnauthorizedError("Invalid credentials")

        logger.log_auth_event("login", success=True, login=login, account_role=role)
        return principal, create_access_token(principal.id, role)

    def public_view(self, role: str, principal) -> PrincipalInfo:
        return get_account_handler(role).public_view(principal)

    async def update_profile(self, role: str, principal_id: str, changes: Dict[str, Any]):
        """Apply the role's editable fields; None values are ignored"""
        handler = get_account_handler(role)
        updates = {
            field: value for field, value in changes.items()
            if field in handler.editable_fields and value is not None
        }

        def on_conflict():
            return DuplicateKeyError(handler.label, "key", None)

        async with self.transaction(on_conflict=on_conflict):
            principal = await self._load(handler.model, principal_id, label=handler.label)
            await handler.ensure_unique(self.db, updates, exclude_id=principal.id)
            for field, value in updates.items():
                setattr(principal, field, value)

        logger.log_domain_event(handler.label, "profile_updated", principal_id, fields=sorted(updates))
        return await self._load(handler.model, principal_id, label=handler.label)

    async def user_stats(self) -> Dict[str, int]:
        counts = {}
        for key, model in (("students", Student), ("faculty", Faculty), ("admins", Admin), ("clubs", Club)):
            counts[key] = (await self.db.execute(select(func.count()).select_from(model))).scalar_one()
        return counts

    async def list_students(self) -> List[Student]:
        result = await self.db.execute(
            select(Student).order_by(Student.usn).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_faculty(self) -> List[Faculty]:
        result = await self.db.execute(
            select(Faculty).order_by(Faculty.faculty_id).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())


def get_identity_service(db: AsyncSession) -> IdentityService:
    return IdentityService(db)
