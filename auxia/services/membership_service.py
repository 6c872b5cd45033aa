"""
Club/Project Membership Service
Club membership, club-owned events and projects, and the project
request -> member workflow.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.exceptions import (
    AlreadyExistsError, AlreadyMemberError, ForbiddenError, InvalidStateError,
)
from auxia.core.logging_config import logger
from auxia.models.club import Club, ClubEvent, ClubProject, EventType
from auxia.models.student import Student
from auxia.services.base import BaseService
from auxia.services.relations import CLUB_MEMBERS, PROJECT_MEMBERS, PROJECT_REQUESTS


class MembershipService(BaseService):
    """Service for clubs, their members, events and projects"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    # =====================================================
    # CLUBS & MEMBERS
    # =====================================================

    async def get_club(self, club_id: str) -> Club:
        return await self._load(Club, club_id)

    async def list_clubs(self) -> List[Club]:
        result = await self.db.execute(
            select(Club).order_by(Club.name).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_members(self, club_id: str) -> List[Student]:
        club = await self._load(Club, club_id)
        return list(club.members)

    async def _join(self, club_id: str, student_id: str) -> None:
        if await CLUB_MEMBERS.exists(self.db, club_id, student_id):
            raise AlreadyMemberError("Student is already a member of this club")
        await CLUB_MEMBERS.link(self.db, club_id, student_id)

    async def add_member(self, club_id: str, student_id: str) -> Club:
        """Club adds a student"""
        async with self.transaction(on_conflict=AlreadyMemberError):
            await self._load(Student, student_id)
            await self._join(club_id, student_id)

        logger.log_domain_event("Club", "member_added", club_id, student_id=student_id)
        return await self.get_club(club_id)

    async def join_club(self, student_id: str, club_id: str) -> Club:
        """Student joins a club; membership is immediate"""
        async with self.transaction(on_conflict=AlreadyMemberError):
            await self._load(Student, student_id)
            await self._load(Club, club_id)
            await self._join(club_id, student_id)

        logger.log_domain_event("Club", "joined", club_id, student_id=student_id)
        return await self.get_club(club_id)

    async def remove_member(self, club_id: str, student_id: str) -> Club:
        """Unconditional; removing a non-member changes nothing"""
        async with self.transaction():
            removed = await CLUB_MEMBERS.unlink(self.db, club_id, student_id)

        if removed:
            logger.log_domain_event("Club", "member_removed", club_id, student_id=student_id)
        return await self.get_club(club_id)

    # =====================================================
    # EVENTS
    # =====================================================

    async def _owned_event(self, club_id: str, event_id: str, action: str) -> ClubEvent:
        event = await self._load(ClubEvent, event_id, label="Event")
        if event.club_id != club_id:
            raise ForbiddenError(f"Not authorized to {action} this event")
        return event

    async def list_events(self, club_id: str) -> List[ClubEvent]:
        result = await self.db.execute(
            select(ClubEvent)
            .where(ClubEvent.club_id == club_id)
            .order_by(ClubEvent.date)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_event(
        self,
        club_id: str,
        name: str,
        event_type: EventType,
        description: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> ClubEvent:
        async with self.transaction():
            event = ClubEvent(
                club_id=club_id, name=name, description=description,
                event_type=event_type, date=date,
            )
            self.db.add(event)

        logger.log_domain_event("Event", "created", event.id, club_id=club_id)
        return await self._load(ClubEvent, event.id, label="Event")

    async def update_event(self, club_id: str, event_id: str, **changes) -> ClubEvent:
        async with self.transaction():
            event = await self._owned_event(club_id, event_id, "update")
            for field in ("name", "description", "event_type", "date"):
                if changes.get(field) is not None:
                    setattr(event, field, changes[field])

        logger.log_domain_event("Event", "updated", event_id)
        return await self._load(ClubEvent, event_id, label="Event")

    async def delete_event(self, club_id: str, event_id: str) -> None:
        async with self.transaction():
            event = await self._owned_event(club_id, event_id, "delete")
            await self.db.delete(event)

        logger.log_domain_event("Event", "deleted", event_id)

    # =====================================================
    # PROJECTS
    # =====================================================

    async def get_project(self, project_id: str) -> ClubProject:
        return await self._load(ClubProject, project_id, label="Project")

    async def _owned_project(self, club_id: str, project_id: str, action: str = "manage") -> ClubProject:
        project = await self.get_project(project_id)
        if project.club_id != club_id:
            raise ForbiddenError(f"Not authorized to {action} this project")
        return project

    async def list_projects(self, club_id: str) -> List[ClubProject]:
        result = await self.db.execute(
            select(ClubProject)
            .where(ClubProject.club_id == club_id)
            .order_by(ClubProject.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_project(self, club_id: str, name: str, description: Optional[str] = None) -> ClubProject:
        async with self.transaction():
            project = ClubProject(club_id=club_id, name=name, description=description, active=True)
            self.db.add(project)

        logger.log_domain_event("Project", "created", project.id, club_id=club_id)
        return await self.get_project(project.id)

    async def update_project(self, club_id: str, project_id: str, **changes) -> ClubProject:
        async with self.transaction():
            project = await self._owned_project(club_id, project_id, "update")
            for field in ("name", "description", "active"):
                if changes.get(field) is not None:
                    setattr(project, field, changes[field])

        logger.log_domain_event("Project", "updated", project_id)
        return await self.get_project(project_id)

    async def delete_project(self, club_id: str, project_id: str) -> None:
        async with self.transaction():
            project = await self._owned_project(club_id, project_id, "delete")
            await self.db.delete(project)

        logger.log_domain_event("Project", "deleted", project_id)

    async def list_project_requests(self, club_id: str, project_id: str) -> List[Student]:
        project = await self._owned_project(club_id, project_id)
        return list(project.requests)

    async def request_project(self, student_id: str, project_id: str) -> ClubProject:
        """Student asks to join a project of a club they belong to"""
        def on_conflict():
            return AlreadyExistsError("Already requested to join this project")

        async with self.transaction(on_conflict=on_conflict):
            project = await self.get_project(project_id)
            if not project.active:
                raise InvalidStateError("Project is not active")
            if not await CLUB_MEMBERS.exists(self.db, project.club_id, student_id):
                raise ForbiddenError("Only club members can request to join a project")
            if await PROJECT_MEMBERS.exists(self.db, project.id, student_id):
                raise AlreadyMemberError("Student is already a project member")
            if await PROJECT_REQUESTS.exists(self.db, project.id, student_id):
                raise on_conflict()
            await PROJECT_REQUESTS.link(self.db, project.id, student_id)

        logger.log_domain_event("Project", "requested", project_id, student_id=student_id)
        return await self.get_project(project_id)

    async def add_project_member(self, club_id: str, project_id: str, student_id: str) -> ClubProject:
        """Move a student into the project's members, clearing any pending request"""
        async with self.transaction(on_conflict=AlreadyMemberError):
            project = await self._owned_project(club_id, project_id)
            if not await CLUB_MEMBERS.exists(self.db, club_id, student_id):
                raise ForbiddenError("Student is not a club member")
            if await PROJECT_MEMBERS.exists(self.db, project.id, student_id):
                raise AlreadyMemberError("Student is already a project member")

            await PROJECT_REQUESTS.unlink(self.db, project.id, student_id)
            await PROJECT_MEMBERS.link(self.db, project.id, student_id)

        logger.log_domain_event("Project", "member_added", project_id, student_id=student_id)
        return await self.get_project(project_id)

    async def remove_project_member(self, club_id: str, project_id: str, student_id: str) -> ClubProject:
        async with self.transaction():
            project = await self._owned_project(club_id, project_id)
            await PROJECT_MEMBERS.unlink(self.db, project.id, student_id)

        logger.log_domain_event("Project", "member_removed", project_id, student_id=student_id)
        return await self.get_project(project_id)


def get_membership_service(db: AsyncSession) -> MembershipService:
    return MembershipService(db)
