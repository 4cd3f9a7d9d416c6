# app/schemas/community.py
from datetime import datetime

from pydantic import Field, field_validator

from app.core.config import get_settings
from app.models.community import Community, MemberRecord
from app.models.user import ProfileRole
from app.schemas.common import CamelModel, required_text

settings = get_settings()


class CommunityCreate(CamelModel):
    """
    Payload for creating a community.

    authorization_code is compared verbatim (clients upper-case it
    before sending).
    """

    name: str = Field(max_length=200)
    address: str = Field(max_length=500)
    authorization_code: str

    @field_validator("name", "address")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return required_text(v)

    @field_validator("authorization_code")
    @classmethod
    def code_not_blank(cls, v: str) -> str:
        return required_text(v, strip=False)


class CommunityCreateResponse(CamelModel):
    success: bool = True
    community: Community
    message: str = "Community created successfully"


class JoinCodeCreate(CamelModel):
    """Payload for minting a join code (owner only)."""

    recipient_name: str | None = Field(default=None, max_length=200)
    expires_in_days: int = Field(
        default=settings.JOIN_CODE_DEFAULT_EXPIRY_DAYS,
        ge=1,
        le=settings.JOIN_CODE_MAX_EXPIRY_DAYS,
    )


class JoinCodeCreateResponse(CamelModel):
    success: bool = True
    join_code: str
    expires_at: datetime


class CommunityJoin(CamelModel):
    join_code: str

    @field_validator("join_code")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return required_text(v)


class CommunityJoinResponse(CamelModel):
    success: bool = True
    community: Community
    message: str = "Successfully joined community"


class MyCommunityRead(CamelModel):
    """
    Caller's community view.

    Empty state is {"community": null, "role": "none"}.
    """

    community: Community | None = None
    role: ProfileRole = "none"
    member_count: int | None = None


class MemberList(CamelModel):
    members: list[MemberRecord]
