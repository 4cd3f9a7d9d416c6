# app/models/base.py
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordModel(BaseModel):
    """
    Base for records stored as JSON in the key-value store.

    Stored (and wire) field names are camelCase; Python attributes are
    snake_case. Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_store(self) -> dict[str, Any]:
        """JSON-safe dict in the stored camelCase layout."""
        return self.model_dump(mode="json", by_alias=True)
