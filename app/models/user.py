# app/models/user.py
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.base import RecordModel, utcnow

# "guest" is kept for clients that store it locally; the server never assigns it.
ProfileRole = Literal["none", "guest", "resident", "owner"]


class UserProfile(RecordModel):
    """
    Persistent user profile, stored under `user:<id>`.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "none" until the user creates or joins a community
      - "owner" after create-community, "resident" after join-community

    Invariant: role != "none" <=> community_id points at an existing
    Community. Only create/join may change community_id.
    Passwords are never stored here; Supabase Auth owns credentials.
    """

    id: str
    email: str
    name: str
    phone_number: str = ""
    role: ProfileRole = "none"
    community_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
