# app/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client

from app.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_public() -> Client:
    """
    Create a Supabase client with the anon/public key.

    Use cases:
      - password sign-in (returns the user's access token)

    Note: This client still respects RLS.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - admin Auth operations (creating pre-confirmed users)

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
