# app/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request/response base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def required_text(v: str, strip: bool = True) -> str:
    """Blank strings count as missing; the value is stripped unless strip=False."""
    if not v.strip():
        raise ValueError("cannot be empty")
    return v.strip() if strip else v
