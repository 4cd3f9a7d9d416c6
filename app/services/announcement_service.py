# app/services/announcement_service.py
import logging

from sqlmodel import Session

from app.core.codes import generate_announcement_id
from app.core.config import get_settings
from app.models.announcement import Announcement
from app.repositories.announcement_repo import AnnouncementRepository
from app.repositories.community_repo import community_key
from app.schemas.announcement import AnnouncementCreate
from app.schemas.user import AuthUser
from app.services.community_service import CommunityService

settings = get_settings()
logger = logging.getLogger(__name__)


class AnnouncementService:
    """
    Owner broadcasts for a community.

    Rules:
      - only the owner posts
      - only members read
      - list is newest-first and capped at ANNOUNCEMENT_LIMIT
    """

    def __init__(
        self,
        repo: AnnouncementRepository,
        communities: CommunityService,
    ):
        self.repo = repo
        self.communities = communities

    def create_announcement(
        self,
        session: Session,
        caller: AuthUser,
        community_id: str,
        payload: AnnouncementCreate,
    ) -> Announcement:
        with self.communities.unit_of_work(session, community_key(community_id)):
            self.communities.require_owner(
                session,
                caller,
                community_id,
                "Only community owner can create announcements",
            )

            announcement = Announcement(
                id=generate_announcement_id(),
                title=payload.title,
                message=payload.message,
                priority=payload.priority,
                created_by=caller.id,
                created_by_name=caller.display_name or "Owner",
            )

            announcements = self.repo.list_for_community(session, community_id)
            announcements.insert(0, announcement)
            del announcements[settings.ANNOUNCEMENT_LIMIT:]

            self.repo.put_all(session, community_id, announcements)

        logger.info(
            "Announcement %s (%s) posted to %s",
            announcement.id,
            announcement.priority,
            community_id,
        )
        return announcement

    def list_announcements(
        self,
        session: Session,
        caller: AuthUser,
        community_id: str,
    ) -> list[Announcement]:
        """Stored list, newest first (members only)."""
        self.communities.require_member(session, caller, community_id)
        return self.repo.list_for_community(session, community_id)
