# app/repositories/community_repo.py
from sqlmodel import Session

from app.models.community import Community, JoinCode, MemberRecord
from app.repositories.kv_repo import KVRepository

AUTH_CODES_KEY = "valid_auth_codes"


def community_key(community_id: str) -> str:
    return f"community:{community_id}"


def members_key(community_id: str) -> str:
    return f"community:{community_id}:members"


def join_code_key(code: str) -> str:
    return f"joincode:{code}"


class CommunityRepository:
    """
    Typed access to communities, rosters, join codes and the
    provisioned authorization-code list.
    """

    def __init__(self, kv: KVRepository):
        self.kv = kv

    # ----- Community -----

    def get(self, session: Session, community_id: str) -> Community | None:
        raw = self.kv.get(session, community_key(community_id))
        if raw is None:
            return None
        return Community.model_validate(raw)

    def exists(self, session: Session, community_id: str) -> bool:
        return self.kv.exists(session, community_key(community_id))

    def put(self, session: Session, community: Community) -> Community:
        self.kv.set(session, community_key(community.id), community.to_store())
        return community

    # ----- Roster -----

    def get_members(self, session: Session, community_id: str) -> list[MemberRecord]:
        """Roster in join order; empty list if none stored."""
        raw = self.kv.get(session, members_key(community_id)) or []
        return [MemberRecord.model_validate(m) for m in raw]

    def put_members(
        self,
        session: Session,
        community_id: str,
        members: list[MemberRecord],
    ) -> None:
        self.kv.set(
            session,
            members_key(community_id),
            [m.to_store() for m in members],
        )

    # ----- Join codes -----

    def get_join_code(self, session: Session, code: str) -> JoinCode | None:
        raw = self.kv.get(session, join_code_key(code))
        if raw is None:
            return None
        return JoinCode.model_validate(raw)

    def join_code_exists(self, session: Session, code: str) -> bool:
        return self.kv.exists(session, join_code_key(code))

    def put_join_code(self, session: Session, join_code: JoinCode) -> JoinCode:
        self.kv.set(session, join_code_key(join_code.code), join_code.to_store())
        return join_code

    # ----- Authorization codes -----

    def get_auth_codes(self, session: Session) -> list[str] | None:
        """Provisioned authorization codes, or None if never seeded."""
        return self.kv.get(session, AUTH_CODES_KEY)

    def put_auth_codes(self, session: Session, codes: list[str]) -> None:
        self.kv.set(session, AUTH_CODES_KEY, list(codes))
