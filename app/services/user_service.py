# app/services/user_service.py
import logging

from sqlmodel import Session

from app.core.auth import ensure_profile
from app.core.identity import SupabaseIdentityProvider
from app.models.user import UserProfile
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AuthUser,
    MeResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)

logger = logging.getLogger(__name__)


class UserService:
    """
    Registration, sign-in and self profile.

    Responsibilities:
      - delegate credentials to the identity provider
      - keep the UserProfile record in step with provider users
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def sign_up(
        self,
        session: Session,
        provider: SupabaseIdentityProvider,
        payload: SignUpRequest,
    ) -> SignUpResponse:
        """
        Register with the provider, then store UserProfile(role="none").
        """
        phone_number = payload.phone_number or ""
        user = provider.sign_up(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            phone_number=phone_number,
        )

        self.repo.put(
            session,
            UserProfile(
                id=user.id,
                email=user.email,
                name=payload.name,
                phone_number=phone_number,
            ),
        )
        session.commit()
        logger.info("User %s signed up", user.id)

        return SignUpResponse(user_id=user.id)

    def sign_in(
        self,
        session: Session,
        provider: SupabaseIdentityProvider,
        payload: SignInRequest,
    ) -> SignInResponse:
        """Password sign-in; returns the access token and stored profile."""
        result = provider.sign_in(email=payload.email, password=payload.password)
        profile = self.repo.get_by_id(session, result.user.id)
        return SignInResponse(
            access_token=result.access_token,
            user=result.user,
            profile=profile,
        )

    def get_me(self, session: Session, current_user: AuthUser) -> MeResponse:
        """Return the caller's identity and profile."""
        return MeResponse(
            user=current_user,
            profile=ensure_profile(session, current_user),
        )
