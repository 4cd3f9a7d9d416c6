# app/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import Unauthenticated
from app.database import get_session
from app.models.user import UserProfile
from app.repositories.kv_repo import KVRepository
from app.repositories.user_repo import UserRepository
from app.schemas.user import AuthUser

settings = get_settings()
logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header does NOT raise here,
#   so require_auth can answer with our own 401 body.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository(KVRepository())


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        Unauthenticated: if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise Unauthenticated("Invalid or expired token")


def _default_name_from_email(email: str) -> str:
    """
    Derive a default display name from email if the provider has no
    name in user_metadata.
    """
    if "@" in email:
        return email.split("@", 1)[0]
    return email


def verify_token(token: str) -> AuthUser:
    """
    Turn a bearer token into the caller's identity.

    Raises:
        Unauthenticated: if token is malformed or missing required claims.
    """
    payload = decode_access_token(token)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise Unauthenticated("Token missing sub/email")

    # Supabase provides sub as a string; enforce UUID
    try:
        uuid.UUID(sub)
    except ValueError:
        raise Unauthenticated("Invalid sub in token")

    return AuthUser(
        id=sub,
        email=email,
        user_metadata=payload.get("user_metadata") or {},
    )


def ensure_profile(session: Session, user: AuthUser) -> UserProfile:
    """
    Return the caller's profile, auto-provisioning a role="none" profile
    for identities that were registered outside /auth/signup.
    """
    profile = user_repo.get_by_id(session, user.id)
    if profile is None:
        profile = UserProfile(
            id=user.id,
            email=user.email,
            name=user.display_name or _default_name_from_email(user.email),
            phone_number=user.phone_number,
        )
        user_repo.put(session, profile)
        session.commit()
        logger.info("Provisioned profile for user %s", user.id)
    return profile


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> AuthUser | None:
    """
    Resolve the current user from a Supabase JWT.

    Flow:
      1. If no Authorization header => return None.
      2. Decode JWT => extract 'sub', 'email' and 'user_metadata'.
      3. Make sure a profile record exists for that id.
    """
    if credentials is None:
        return None

    user = verify_token(credentials.credentials)
    ensure_profile(session, user)
    return user


def require_auth(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    """
    Enforce authentication.

    Raises:
        Unauthenticated: if the Authorization header is missing.
    """
    if user is None:
        raise Unauthenticated("Missing authorization header")
    return user
