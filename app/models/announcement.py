# app/models/announcement.py
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.base import RecordModel, utcnow

Priority = Literal["normal", "important", "urgent"]


class Announcement(RecordModel):
    """
    Owner broadcast, kept newest-first under `community:<id>:announcements`.
    """

    id: str
    title: str
    message: str
    priority: Priority = "normal"
    created_by: str
    created_by_name: str
    created_at: datetime = Field(default_factory=utcnow)
