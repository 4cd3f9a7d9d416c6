# app/schemas/announcement.py
from pydantic import Field, field_validator

from app.models.announcement import Announcement, Priority
from app.schemas.common import CamelModel, required_text


class AnnouncementCreate(CamelModel):
    """
    Payload for an owner announcement.

    priority is limited to normal | important | urgent; clients only
    special-case "urgent".
    """

    title: str = Field(max_length=200)
    message: str = Field(max_length=5000)
    priority: Priority = "normal"

    @field_validator("title", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return required_text(v)


class AnnouncementCreateResponse(CamelModel):
    success: bool = True
    announcement: Announcement


class AnnouncementList(CamelModel):
    announcements: list[Announcement]
