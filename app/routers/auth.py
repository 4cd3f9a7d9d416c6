# app/routers/auth.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.identity import SupabaseIdentityProvider, get_identity_provider
from app.database import get_session
from app.repositories.kv_repo import KVRepository
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AuthUser,
    MeResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository(KVRepository())
service = UserService(repo)


@router.post("/signup", response_model=SignUpResponse)
def sign_up(
    payload: SignUpRequest,
    session: Session = Depends(get_session),
    provider: SupabaseIdentityProvider = Depends(get_identity_provider),
):
    """
    Register a new user.

    Creates a pre-confirmed Supabase user and a profile with role="none".
    """
    return service.sign_up(session, provider, payload)


@router.post("/signin", response_model=SignInResponse)
def sign_in(
    payload: SignInRequest,
    session: Session = Depends(get_session),
    provider: SupabaseIdentityProvider = Depends(get_identity_provider),
):
    """
    Password sign-in.

    Returns the access token to send as `Authorization: Bearer <token>`.
    """
    return service.sign_in(session, provider, payload)


@router.get("/me", response_model=MeResponse)
def read_me(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Return the authenticated user's identity and profile.

    Auth:
      - Requires valid Supabase JWT.
    """
    return service.get_me(session, current_user)
