# app/repositories/user_repo.py
from sqlmodel import Session

from app.models.user import UserProfile
from app.repositories.kv_repo import KVRepository


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


class UserRepository:
    """
    Typed access to UserProfile records (`user:<id>`).

    Responsibilities:
      - Pure store operations
      - No FastAPI, no HTTP, no business logic
    """

    def __init__(self, kv: KVRepository):
        self.kv = kv

    def get_by_id(self, session: Session, user_id: str) -> UserProfile | None:
        """Return a profile by user id, or None if not found."""
        raw = self.kv.get(session, user_key(user_id))
        if raw is None:
            return None
        return UserProfile.model_validate(raw)

    def put(self, session: Session, profile: UserProfile) -> UserProfile:
        """Stage an insert/update of the profile."""
        self.kv.set(session, user_key(profile.id), profile.to_store())
        return profile
