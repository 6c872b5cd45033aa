"""Column types shared by the Auxia models"""
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid() -> str:
    return str(uuid.uuid4())


def is_valid_uuid(value) -> bool:
    """Check that a client-supplied id has UUID shape before it reaches a query"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _canonical(value) -> str:
    """Lowercase hyphenated form; anything that is not a UUID passes through unchanged"""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return str(value)


class GUID(TypeDecorator):
    """
    UUID primary/foreign key kept as a 36-character string on every backend.

    Values are canonicalised on the way in, so an id sent in upper case or
    without hyphens still matches the stored row. Python code always sees
    `str` ids.
    """
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else _canonical(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)
