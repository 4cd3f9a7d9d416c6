# app/repositories/kv_repo.py
from typing import Any

from sqlmodel import Session

from app.models.kv import KVRecord


class KVRepository:
    """
    Raw key-value access.

    Responsibilities:
      - get / set / exists by key
      - No commit: writes are staged in the session and committed by
        the service that owns the unit of work
    """

    def get(self, session: Session, key: str) -> Any | None:
        """Return the stored value for key, or None if absent."""
        record = session.get(KVRecord, key)
        if record is None:
            return None
        return record.value

    def exists(self, session: Session, key: str) -> bool:
        return session.get(KVRecord, key) is not None

    def set(self, session: Session, key: str, value: Any) -> None:
        """Upsert key -> value."""
        session.merge(KVRecord(key=key, value=value))
        session.flush()
