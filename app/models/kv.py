# app/models/kv.py
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from app.core.config import get_settings

settings = get_settings()


class KVRecord(SQLModel, table=True):
    """
    One row of the generic key-value store.

    Every domain record (profiles, communities, rosters, join codes,
    announcement lists, the auth-code list) lives here as a JSON value
    under a deterministic string key. There are no secondary indexes:
    every lookup is a fetch by key.
    """

    __tablename__ = settings.KV_TABLE_NAME

    key: str = Field(
        primary_key=True,
        description="Record key, e.g. 'community:<id>:members'",
    )

    value: Any = Field(
        sa_column=Column(JSON, nullable=False),
        description="JSON-serializable payload",
    )
