"""
Service base class.

Every service operation is one unit of work: it validates, mutates and
commits inside `transaction()`. Any exception rolls the session back, so a
rejected operation never leaves a partial mutation behind.
"""

from contextlib import asynccontextmanager
from typing import Callable, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.exceptions import AuxiaError, AlreadyExistsError, NotFoundError
from auxia.core.logging_config import logger
from auxia.core.types import is_valid_uuid

ModelT = TypeVar("ModelT")

# SQLSTATE class 23 code for foreign_key_violation (PostgreSQL)
FOREIGN_KEY_VIOLATION = "23503"


def is_foreign_key_violation(error: IntegrityError) -> bool:
    orig = error.orig
    if (getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)) == FOREIGN_KEY_VIOLATION:
        return True
    # SQLite reports it only in the message
    return "FOREIGN KEY constraint failed" in str(orig)


class BaseService:
    """Holds the session and the shared unit-of-work helpers"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def transaction(self, on_conflict: Optional[Callable[[], AuxiaError]] = None):
        """
        Commit on success, roll back on any error.

        A unique/check constraint violation means a concurrent request won
        the race; it is reported as `on_conflict()` (or a generic
        AlreadyExistsError) instead of a 500. A foreign-key violation means
        a referenced row is gone and is reported as NotFoundError.
        """
        try:
            yield
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if is_foreign_key_violation(e):
                error = NotFoundError("Reference")
            elif on_conflict:
                error = on_conflict()
            else:
                error = AlreadyExistsError("Conflicting record already exists")
            logger.log_rule_violation("integrity", error.message, db_error=str(e.orig))
            raise error from e
        except AuxiaError as e:
            await self.db.rollback()
            logger.log_rule_violation(type(e).__name__, e.message, code=e.code)
            raise
        except Exception:
            await self.db.rollback()
            raise

    async def _load(self, model: Type[ModelT], entity_id: str, label: Optional[str] = None) -> ModelT:
        """Fresh read by primary key; NotFoundError when absent"""
        label = label or model.__name__
        if not entity_id or not is_valid_uuid(entity_id):
            raise NotFoundError(label, entity_id)

        result = await self.db.execute(
            select(model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        entity = result.scalar_one_or_none()
        if entity is None:
            raise NotFoundError(label, entity_id)
        return entity

    async def _exists(self, model, entity_id: str) -> bool:
        if not entity_id or not is_valid_uuid(entity_id):
            return False
        result = await self.db.execute(select(model.id).where(model.id == entity_id))
        return result.scalar_one_or_none() is not None
