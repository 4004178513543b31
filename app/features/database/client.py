"""
Database Client - Supabase access scoped to the calling user.

Every client is created with the caller's JWT in the Authorization header, so
PostgREST evaluates row-level security as that user: a caller can only read or
update journals it owns.
"""

from supabase import Client, ClientOptions, create_client

from app.core.config import settings
from app.shared.errors import PersistenceFailure


def create_user_client(access_token: str) -> Client:
    """
    Create a Supabase client acting on behalf of ``access_token``'s user.

    Raises:
        PersistenceFailure: Supabase URL or anon key is not configured
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise PersistenceFailure("Supabase is not configured", operation="connect")

    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
    )

