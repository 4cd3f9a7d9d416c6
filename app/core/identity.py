# app/core/identity.py
"""
Sign-up / sign-in against the managed identity provider.

The provider owns credentials; this module only forwards them and
converts the provider's user object into our AuthUser shape.
"""
import logging
from typing import Any

from supabase import AuthError

from app.core.errors import ValidationFailed
from app.core.supabase_client import supabase_admin, supabase_public
from app.schemas.common import CamelModel
from app.schemas.user import AuthUser

logger = logging.getLogger(__name__)


class ProviderSession(CamelModel):
    access_token: str
    user: AuthUser


def _to_auth_user(user: Any) -> AuthUser:
    return AuthUser(
        id=str(user.id),
        email=user.email or "",
        user_metadata=dict(user.user_metadata or {}),
    )


class SupabaseIdentityProvider:
    """Thin wrapper over supabase-py auth calls."""

    def sign_up(
        self,
        email: str,
        password: str,
        name: str,
        phone_number: str = "",
    ) -> AuthUser:
        """
        Create a provider user with the email already confirmed
        (no outbound mail server is configured).

        Raises:
            ValidationFailed: with the provider's message on rejection.
        """
        try:
            response = supabase_admin().auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "user_metadata": {"name": name, "phoneNumber": phone_number},
                    "email_confirm": True,
                }
            )
        except AuthError as exc:
            logger.warning("Error during signup for %s: %s", email, exc.message)
            raise ValidationFailed(exc.message)
        return _to_auth_user(response.user)

    def sign_in(self, email: str, password: str) -> ProviderSession:
        """
        Password sign-in.

        Raises:
            ValidationFailed: with the provider's message on bad credentials.
        """
        try:
            response = supabase_public().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            logger.warning("Error during signin for %s: %s", email, exc.message)
            raise ValidationFailed(exc.message)
        return ProviderSession(
            access_token=response.session.access_token,
            user=_to_auth_user(response.user),
        )


def get_identity_provider() -> SupabaseIdentityProvider:
    """FastAPI dependency; tests override it with a fake provider."""
    return SupabaseIdentityProvider()
