"""
Domain Exceptions for Auxia
===========================

Services raise these instead of HTTPException so the same business rules
can be exercised from tests, seed scripts and the API alike. The API layer
renders them through a single exception handler (see auxia.main).

Usage:
    from auxia.core.exceptions import NotFoundError, CapacityExceededError

    if not course:
        raise NotFoundError("Course", course_id)

    if course.seats_filled >= course.seat_limit:
        raise CapacityExceededError("Course is full")
"""

from typing import Optional, Any, Dict


class AuxiaError(Exception):
    """Base exception for all Auxia business-rule errors"""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class UnauthorizedError(AuxiaError):
    """Missing, malformed or stale credentials"""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(AuxiaError):
    """Role or ownership mismatch"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(AuxiaError):
    """Referenced entity does not exist"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        message = f"{resource_type} not found"
        if resource_id:
            message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(
            message,
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(AuxiaError):
    """Input validation failed"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class DuplicateKeyError(AuxiaError):
    """Unique natural key already taken"""

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            f"{resource_type} with this {field} already exists",
            code="DUPLICATE_KEY",
            details={"resource_type": resource_type, "field": field, "value": value}
        )


class InvalidStateError(AuxiaError):
    """Operation not allowed in the entity's current state"""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_STATE")


class CapacityExceededError(AuxiaError):
    """Seat limit or faculty course cap reached"""

    def __init__(self, message: str, limit: Optional[int] = None):
        super().__init__(message, code="CAPACITY_EXCEEDED")
        if limit is not None:
            self.details["limit"] = limit


# ============================================
# Idempotency Errors
# ============================================

class AlreadyExistsError(AuxiaError):
    """Record for this key already exists"""

    def __init__(self, message: str):
        super().__init__(message, code="ALREADY_EXISTS")


class AlreadyMemberError(AlreadyExistsError):
    """Student already belongs to the club or project"""

    def __init__(self, message: str = "Student is already a member"):
        super().__init__(message)
        self.code = "ALREADY_MEMBER"


class AlreadyRegisteredError(AlreadyExistsError):
    """Student already enrolled in the course"""

    def __init__(self, message: str = "Already registered for this course"):
        super().__init__(message)
        self.code = "ALREADY_REGISTERED"


# ============================================
# Transport Errors
# ============================================

class PayloadTooLargeError(AuxiaError):
    """Request body over MAX_REQUEST_SIZE; raised by middleware, not services"""

    status_code = 413

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Request body too large. Maximum size is {limit} bytes",
            code="PAYLOAD_TOO_LARGE",
            details={"size": size, "limit": limit}
        )


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: AuxiaError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "message": error.message,
        "error": error.to_dict()
    }
