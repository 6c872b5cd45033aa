from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from auxia.core.database import get_db
from auxia.core.logging_config import set_principal_id, set_role
from auxia.core.security import decode_token
from auxia.services.identity_service import IdentityService

# auto_error=False so a missing header is a 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
):
    """Resolve the bearer token to a Student, Faculty, Admin or Club"""

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type"
        )

    principal_id = payload.get("sub")
    role = payload.get("role")
    if not principal_id or not role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    principal = await IdentityService(db).get_principal(role, principal_id)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    # Used by the rate limiter key and the log context
    request.state.principal_id = principal.id
    request.state.role = role
    set_principal_id(principal.id)
    set_role(role)

    return principal


def require_role(role: str):
    """Dependency factory: the principal must hold `role`, else 403"""

    async def dependency(
        request: Request,
        principal=Depends(get_current_principal),
    ):
        if request.state.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.capitalize()} access required"
            )
        return principal

    dependency.__name__ = f"require_{role}"
    return dependency


get_current_student = require_role("student")
get_current_faculty = require_role("faculty")
get_current_admin = require_role("admin")
get_current_club = require_role("club")


__all__ = [
    "get_current_principal",
    "require_role",
    "get_current_student",
    "get_current_faculty",
    "get_current_admin",
    "get_current_club",
]
