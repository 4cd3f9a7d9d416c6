# app/repositories/announcement_repo.py
from sqlmodel import Session

from app.models.announcement import Announcement
from app.repositories.kv_repo import KVRepository


def announcements_key(community_id: str) -> str:
    return f"community:{community_id}:announcements"


class AnnouncementRepository:

    def __init__(self, kv: KVRepository):
        self.kv = kv

    # Newest first, as stored
    def list_for_community(
        self, session: Session, community_id: str
    ) -> list[Announcement]:
        raw = self.kv.get(session, announcements_key(community_id)) or []
        return [Announcement.model_validate(a) for a in raw]

    def put_all(
        self,
        session: Session,
        community_id: str,
        announcements: list[Announcement],
    ) -> None:
        self.kv.set(
            session,
            announcements_key(community_id),
            [a.to_store() for a in announcements],
        )
