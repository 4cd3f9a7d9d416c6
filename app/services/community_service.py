# app/services/community_service.py
import logging
from contextlib import contextmanager
from datetime import timedelta
from typing import Iterator

from sqlmodel import Session

from app.core.codes import generate_code, generate_community_id
from app.core.config import get_settings
from app.core.errors import (
    AlreadyInCommunity,
    AlreadyMember,
    Forbidden,
    JoinCodeAlreadyUsed,
    JoinCodeExpired,
    NotFound,
)
from app.core.locks import KeyedLocks
from app.models.base import utcnow
from app.models.community import Community, JoinCode, MemberRecord
from app.models.user import UserProfile
from app.repositories.community_repo import (
    CommunityRepository,
    community_key,
    join_code_key,
)
from app.repositories.user_repo import UserRepository, user_key
from app.schemas.community import (
    CommunityCreate,
    CommunityJoin,
    JoinCodeCreate,
    JoinCodeCreateResponse,
    MyCommunityRead,
)
from app.schemas.user import AuthUser

settings = get_settings()
logger = logging.getLogger(__name__)

# Regeneration attempts before giving up on a colliding id/code
MAX_ID_ATTEMPTS = 5


class CommunityService:
    """
    Community membership and join-code lifecycle.

    Responsibilities:
      - create communities behind a provisioned authorization code
      - mint single-use, time-limited join codes (owner only)
      - redeem join codes into roster + profile updates
      - member-only reads (my community, roster)

    Every mutation is one unit of work: per-key locks held in the order
    join code -> community -> user, fresh reads, a single commit.
    """

    def __init__(
        self,
        community_repo: CommunityRepository,
        user_repo: UserRepository,
        locks: KeyedLocks,
    ):
        self.community_repo = community_repo
        self.user_repo = user_repo
        self.locks = locks

    # ---- unit of work ----

    @contextmanager
    def unit_of_work(self, session: Session, *lock_keys: str) -> Iterator[None]:
        with self.locks.hold(*lock_keys):
            # Drop anything read before the lock was taken
            session.expire_all()
            try:
                yield
                session.commit()
            except Exception:
                session.rollback()
                raise

    # ---- internal helpers ----

    def _load_profile(self, session: Session, caller: AuthUser) -> UserProfile:
        profile = self.user_repo.get_by_id(session, caller.id)
        if profile is None:
            profile = UserProfile(
                id=caller.id,
                email=caller.email,
                name=caller.display_name or caller.email,
                phone_number=caller.phone_number,
            )
        return profile

    def _ensure_can_enter(self, profile: UserProfile) -> None:
        if profile.community_id and not settings.ALLOW_COMMUNITY_SWITCH:
            raise AlreadyInCommunity()

    def _valid_auth_codes(self, session: Session) -> list[str]:
        codes = self.community_repo.get_auth_codes(session)
        if codes is None:
            return list(settings.DEFAULT_AUTH_CODES)
        return codes

    def _new_community_id(self, session: Session) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            community_id = generate_community_id()
            if not self.community_repo.exists(session, community_id):
                return community_id
        raise RuntimeError("Could not allocate a unique community id")

    def _new_join_code(self, session: Session) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            code = generate_code(settings.JOIN_CODE_LENGTH)
            if not self.community_repo.join_code_exists(session, code):
                return code
            logger.warning("Join code collision on %s, regenerating", code)
        raise RuntimeError("Could not allocate a unique join code")

    # ---- shared authorization checks ----

    def get_community_or_404(self, session: Session, community_id: str) -> Community:
        community = self.community_repo.get(session, community_id)
        if community is None:
            raise NotFound("Community not found")
        return community

    def require_owner(
        self,
        session: Session,
        caller: AuthUser,
        community_id: str,
        detail: str = "Only community owner can perform this action",
    ) -> Community:
        """
        Load the community and check the caller owns it.

        Raises:
            NotFound: community absent.
            Forbidden: caller is not community.owner_id.
        """
        community = self.get_community_or_404(session, community_id)
        if community.owner_id != caller.id:
            raise Forbidden(detail)
        return community

    def require_member(
        self,
        session: Session,
        caller: AuthUser,
        community_id: str,
    ) -> UserProfile:
        """
        Members only: the caller's profile must point at community_id.

        Raises:
            Forbidden: caller belongs elsewhere (or nowhere).
        """
        profile = self.user_repo.get_by_id(session, caller.id)
        if profile is None or profile.community_id != community_id:
            raise Forbidden("You are not a member of this community")
        return profile

    # ---- public operations ----

    def create_community(
        self,
        session: Session,
        caller: AuthUser,
        payload: CommunityCreate,
    ) -> Community:
        """
        Create a community with the caller as owner.

        Steps:
          1. Authorization code must be in the provisioned list.
          2. Caller must not already belong to a community
             (unless ALLOW_COMMUNITY_SWITCH).
          3. Persist Community(member_count=1), the one-entry roster,
             and flip the caller's profile to role="owner".
        """
        with self.unit_of_work(session, user_key(caller.id)):
            if payload.authorization_code not in self._valid_auth_codes(session):
                raise Forbidden("Invalid authorization code")

            profile = self._load_profile(session, caller)
            self._ensure_can_enter(profile)

            now = utcnow()
            owner_name = caller.display_name or "Owner"
            community = Community(
                id=self._new_community_id(session),
                name=payload.name,
                address=payload.address,
                owner_id=caller.id,
                owner_name=owner_name,
                created_at=now,
            )
            members = [
                MemberRecord(
                    user_id=caller.id,
                    name=owner_name,
                    email=caller.email,
                    role="owner",
                    joined_at=now,
                )
            ]
            community.member_count = len(members)

            self.community_repo.put(session, community)
            self.community_repo.put_members(session, community.id, members)

            profile.role = "owner"
            profile.community_id = community.id
            self.user_repo.put(session, profile)

        logger.info("Community %s created by %s", community.id, caller.id)
        return community

    def generate_join_code(
        self,
        session: Session,
        caller: AuthUser,
        community_id: str,
        payload: JoinCodeCreate,
    ) -> JoinCodeCreateResponse:
        """
        Mint a single-use join code for the caller's community.

        Only the owner may do this; nothing is written otherwise.
        """
        with self.unit_of_work(session, community_key(community_id)):
            community = self.require_owner(
                session,
                caller,
                community_id,
                "Only community owner can generate join codes",
            )

            now = utcnow()
            join_code = JoinCode(
                code=self._new_join_code(session),
                community_id=community.id,
                community_name=community.name,
                recipient_name=payload.recipient_name or "",
                created_by=caller.id,
                created_at=now,
                expires_at=now + timedelta(days=payload.expires_in_days),
            )
            self.community_repo.put_join_code(session, join_code)

        logger.info(
            "Join code generated for community %s (expires %s)",
            community_id,
            join_code.expires_at.isoformat(),
        )
        return JoinCodeCreateResponse(
            join_code=join_code.code,
            expires_at=join_code.expires_at,
        )

    def join_community(
        self,
        session: Session,
        caller: AuthUser,
        payload: CommunityJoin,
    ) -> Community:
        """
        Redeem a join code.

        Checks, each with its own error:
          code exists (404) -> not expired (409 expired) -> not used
          (409 already_used) -> community exists (404) -> caller not on
          roster (409 already_member) -> caller not in another community
          (409 already_in_community).

        On success the roster, community, profile and join code are
        written in one transaction.
        """
        code = payload.join_code

        with self.locks.hold(join_code_key(code)):
            session.expire_all()
            join_code = self.community_repo.get_join_code(session, code)
            if join_code is None:
                raise NotFound("Invalid join code")

            now = utcnow()
            if join_code.is_expired(now):
                raise JoinCodeExpired()
            if join_code.used:
                raise JoinCodeAlreadyUsed()

            community_id = join_code.community_id
            with self.unit_of_work(
                session, community_key(community_id), user_key(caller.id)
            ):
                community = self.get_community_or_404(session, community_id)
                members = self.community_repo.get_members(session, community_id)

                if any(m.user_id == caller.id for m in members):
                    raise AlreadyMember()

                profile = self._load_profile(session, caller)
                self._ensure_can_enter(profile)

                members.append(
                    MemberRecord(
                        user_id=caller.id,
                        name=caller.display_name or "Member",
                        email=caller.email,
                        role="resident",
                        joined_at=now,
                    )
                )
                self.community_repo.put_members(session, community_id, members)

                community.member_count = len(members)
                self.community_repo.put(session, community)

                profile.role = "resident"
                profile.community_id = community_id
                self.user_repo.put(session, profile)

                join_code.used = True
                join_code.used_by = caller.id
                join_code.used_at = now
                self.community_repo.put_join_code(session, join_code)

        logger.info("User %s joined community %s", caller.id, community_id)
        return community

    def get_my_community(
        self,
        session: Session,
        caller: AuthUser,
    ) -> MyCommunityRead:
        """Caller's community, role and live roster size."""
        profile = self.user_repo.get_by_id(session, caller.id)
        if profile is None or not profile.community_id:
            return MyCommunityRead(community=None, role="none")

        community = self.community_repo.get(session, profile.community_id)
        members = self.community_repo.get_members(session, profile.community_id)
        return MyCommunityRead(
            community=community,
            role=profile.role,
            member_count=len(members),
        )

    def list_members(
        self,
        session: Session,
        caller: AuthUser,
        community_id: str,
    ) -> list[MemberRecord]:
        """Roster in join order (members only)."""
        self.require_member(session, caller, community_id)
        return self.community_repo.get_members(session, community_id)
