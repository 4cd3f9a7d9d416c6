# app/models/community.py
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.base import RecordModel, utcnow

MemberRole = Literal["owner", "resident"]


class CommunitySettings(RecordModel):
    allow_guest_viewing: bool = False
    require_approval: bool = True


class Community(RecordModel):
    """
    A residential community, stored under `community:<id>`.

    Invariants:
      - owner_id is the creating user; that profile has role "owner"
        and community_id == id
      - member_count == len(roster), recomputed on every membership change
    """

    id: str
    name: str
    address: str
    owner_id: str
    owner_name: str
    member_count: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    settings: CommunitySettings = Field(default_factory=CommunitySettings)


class MemberRecord(RecordModel):
    """
    One roster entry, kept in join order under `community:<id>:members`.
    name/email are snapshots taken at join time.
    """

    user_id: str
    name: str
    email: str
    role: MemberRole
    joined_at: datetime = Field(default_factory=utcnow)


class JoinCode(RecordModel):
    """
    Single-use invitation token, stored under `joincode:<code>`.

    Lifecycle:
      - used goes False -> True exactly once (used_by / used_at stamped)
      - redeemable only while not used and now < expires_at
    """

    code: str
    community_id: str
    community_name: str
    recipient_name: str = ""
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    used: bool = False
    used_by: str | None = None
    used_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
