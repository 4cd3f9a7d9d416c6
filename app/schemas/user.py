# app/schemas/user.py
from typing import Any

from pydantic import EmailStr, Field, field_validator

from app.models.user import UserProfile
from app.schemas.common import CamelModel, required_text


class AuthUser(CamelModel):
    """
    Verified caller identity, taken from the access token claims.

    Passed explicitly into every service call; nothing reads ambient
    session state.
    """

    id: str
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str | None:
        name = self.user_metadata.get("name")
        return name or None

    @property
    def phone_number(self) -> str:
        return self.user_metadata.get("phoneNumber") or ""


class SignUpRequest(CamelModel):
    """
    Payload for registration.

    Validation rules:
      - email must be a valid EmailStr
      - password / name cannot be empty or whitespace
    """

    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(max_length=100)
    phone_number: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return required_text(v)


class SignUpResponse(CamelModel):
    success: bool = True
    user_id: str
    message: str = "User created successfully"


class SignInRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SignInResponse(CamelModel):
    success: bool = True
    access_token: str
    user: AuthUser
    profile: UserProfile | None = None


class MeResponse(CamelModel):
    user: AuthUser
    profile: UserProfile | None = None
