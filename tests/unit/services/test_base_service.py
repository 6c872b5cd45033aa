"""
Unit Tests for BaseService.transaction - integrity errors map to domain errors
"""
import pytest

from auxia.core.exceptions import AlreadyMemberError, NotFoundError
from auxia.services.base import BaseService
from auxia.services.relations import CLUB_MEMBERS

MISSING_ID = "7c0e4f0e-0000-4000-8000-000000000000"


class TestTransactionErrors:

    async def test_missing_reference_is_not_found(self, db_session, club):
        club_id = club.id
        service = BaseService(db_session)

        with pytest.raises(NotFoundError) as exc:
            async with service.transaction(on_conflict=AlreadyMemberError):
                await CLUB_MEMBERS.link(db_session, club_id, MISSING_ID)

        assert exc.value.code == "REFERENCE_NOT_FOUND"
        assert not await CLUB_MEMBERS.exists(db_session, club_id, MISSING_ID)

    async def test_duplicate_link_uses_conflict_error(self, db_session, club, student):
        club_id, student_id = club.id, student.id
        service = BaseService(db_session)
        async with service.transaction():
            await CLUB_MEMBERS.link(db_session, club_id, student_id)

        with pytest.raises(AlreadyMemberError):
            async with service.transaction(on_conflict=AlreadyMemberError):
                await CLUB_MEMBERS.link(db_session, club_id, student_id)

        assert await CLUB_MEMBERS.exists(db_session, club_id, student_id)
