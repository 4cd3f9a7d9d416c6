# app/routers/announcements.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.repositories.announcement_repo import AnnouncementRepository
from app.repositories.kv_repo import KVRepository
from app.routers.communities import service as community_service
from app.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementCreateResponse,
    AnnouncementList,
)
from app.schemas.user import AuthUser
from app.services.announcement_service import AnnouncementService

router = APIRouter(prefix="/communities", tags=["Announcements"])

repo = AnnouncementRepository(KVRepository())
service = AnnouncementService(repo, community_service)


@router.post(
    "/{community_id}/announcements",
    response_model=AnnouncementCreateResponse,
)
def create_announcement(
    community_id: str,
    payload: AnnouncementCreate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Post an announcement (community owner only).

    The list keeps the newest 50 entries.
    """
    announcement = service.create_announcement(
        session, current_user, community_id, payload
    )
    return AnnouncementCreateResponse(announcement=announcement)


@router.get(
    "/{community_id}/announcements",
    response_model=AnnouncementList,
)
def list_announcements(
    community_id: str,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Announcements, newest first (members only).

    Clients poll this every 30 seconds.
    """
    announcements = service.list_announcements(session, current_user, community_id)
    return AnnouncementList(announcements=announcements)
