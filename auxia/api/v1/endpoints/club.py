"""
Club API Endpoints
Profile, members, events, projects (with join requests) and club
announcements. Every record touched must belong to the calling club.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from auxia.core.database import get_db
from auxia.models.club import Club
from auxia.modules.auth.dependencies import get_current_club
from auxia.schemas.announcement import (
    AnnouncementResponse, AnnouncementMutationResponse, AnnouncementPost,
)
from auxia.schemas.club import (
    MemberAdd, EventCreate, EventUpdate, EventResponse, EventMutationResponse,
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectMutationResponse,
)
from auxia.schemas.common import MessageResponse, StudentSummary
from auxia.schemas.profile import ClubProfile, ClubProfileUpdate
from auxia.services.announcement_service import AnnouncementService
from auxia.services.identity_service import IdentityService
from auxia.services.membership_service import MembershipService

router = APIRouter()


@router.get("/profile", response_model=ClubProfile)
async def get_profile(club: Club = Depends(get_current_club)):
    return club


@router.put("/profile", response_model=ClubProfile)
async def update_profile(
    payload: ClubProfileUpdate,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    return await IdentityService(db).update_profile("club", club.id, payload.model_dump())


# ==================== Members ====================

@router.get("/members", response_model=List[StudentSummary])
async def list_members(
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    return await MembershipService(db).list_members(club.id)


@router.post("/members", response_model=MessageResponse)
async def add_member(
    payload: MemberAdd,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    await MembershipService(db).add_member(club.id, payload.student_id)
    return {"message": "Member added successfully"}


@router.delete("/members/{student_id}", response_model=MessageResponse)
async def remove_member(
    student_id: str,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    await MembershipService(db).remove_member(club.id, student_id)
    return {"message": "Member removed successfully"}


# ==================== Events ====================

@router.post("/events", response_model=EventMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    event = await MembershipService(db).create_event(club.id, **payload.model_dump())
    return {"message": "Event created successfully", "event": event}


@router.get("/events", response_model=List[EventResponse])
async def list_events(
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    return await MembershipService(db).list_events(club.id)


@router.put("/events/{event_id}", response_model=EventMutationResponse)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    event = await MembershipService(db).update_event(club.id, event_id, **payload.model_dump())
    return {"message": "Event updated successfully", "event": event}


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    await MembershipService(db).delete_event(club.id, event_id)
    return {"message": "Event deleted successfully"}


# ==================== Projects ====================

@router.post("/projects", response_model=ProjectMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    project = await MembershipService(db).create_project(club.id, payload.name, payload.description)
    return {"message": "Project created successfully", "project": project}


@router.get("/projects", response_model=List[ProjectResponse])
async def list_projects(
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    return await MembershipService(db).list_projects(club.id)


@router.put("/projects/{project_id}", response_model=ProjectMutationResponse)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    project = await MembershipService(db).update_project(club.id, project_id, **payload.model_dump())
    return {"message": "Project updated successfully", "project": project}


@router.delete("/projects/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    await MembershipService(db).delete_project(club.id, project_id)
    return {"message": "Project deleted successfully"}


@router.post("/projects/{project_id}/members", response_model=ProjectMutationResponse)
async def add_project_member(
    project_id: str,
    payload: MemberAdd,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    """Add a club member to the project, clearing their pending request"""
    project = await MembershipService(db).add_project_member(club.id, project_id, payload.student_id)
    return {"message": "Member added to project successfully", "project": project}


@router.delete("/projects/{project_id}/members/{student_id}", response_model=ProjectMutationResponse)
async def remove_project_member(
    project_id: str,
    student_id: str,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    project = await MembershipService(db).remove_project_member(club.id, project_id, student_id)
    return {"message": "Member removed from project successfully", "project": project}


@router.get("/projects/{project_id}/requests", response_model=List[StudentSummary])
async def list_project_requests(
    project_id: str,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    return await MembershipService(db).list_project_requests(club.id, project_id)


# ==================== Announcements ====================

@router.post("/announcements", response_model=AnnouncementMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementPost,
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    announcement = await AnnouncementService(db).create_club_announcement(
        club.id, payload.title, payload.description,
    )
    return {"message": "Announcement created successfully", "announcement": announcement}


@router.get("/announcements", response_model=List[AnnouncementResponse])
async def list_announcements(
    club: Club = Depends(get_current_club),
    db: AsyncSession = Depends(get_db)
):
    return await AnnouncementService(db).list_club_announcements(club.id)
