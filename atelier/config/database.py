"""Supabase client construction."""
from typing import Optional
import logging

from supabase import AsyncClient, acreate_client

from atelier.config.settings import settings
from atelier.core.exceptions import BackendNotConfiguredError

# Global client instance for anonymous (not signed in) access
_supabase_client: Optional[AsyncClient] = None

logger = logging.getLogger(__name__)


async def get_supabase_client() -> Optional[AsyncClient]:
    """
    Get the shared anon Supabase client.

    Returns None when the backend is not configured so that read paths can
    degrade to empty data instead of crashing.
    """
    global _supabase_client

    if not settings.supabase_configured:
        return None

    if _supabase_client is None:
        try:
            _supabase_client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
            logger.info("Supabase client (anon) initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            return None

    return _supabase_client


async def get_authenticated_supabase_client(
    access_token: Optional[str],
    refresh_token: Optional[str] = None,
) -> Optional[AsyncClient]:
    """
    Get a Supabase client carrying one caller's session.

    Every request or socket gets its own client so that sessions never leak
    between users. Without tokens the client is simply unauthenticated.
    """
    if not settings.supabase_configured:
        return None

    try:
        client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Failed to create authenticated Supabase client: {e}")
        return None

    if access_token:
        try:
            await client.auth.set_session(access_token, refresh_token or "")
            logger.debug("Set session for authenticated request")
        except Exception as session_error:
            # An expired or forged token leaves the client signed out
            logger.warning(f"Failed to set session: {session_error}")

    return client


def require_client(client: Optional[AsyncClient]) -> AsyncClient:
    """Return the client or fail the mutating action with a configuration error."""
    if client is None:
        raise BackendNotConfiguredError()
    return client


async def close_supabase_client(client: Optional[AsyncClient]) -> None:
    """
    Close the HTTP sessions held by a per-caller client.

    Only sessions that were actually opened are closed; postgrest is built
    lazily on first table access.
    """
    if client is None:
        return

    http_sessions = (
        getattr(client, "_postgrest", None),
        getattr(getattr(client, "auth", None), "_http_client", None),
    )
    for http_session in http_sessions:
        if http_session is None:
            continue
        try:
            await http_session.aclose()
        except Exception as e:
            logger.warning(f"Failed to close Supabase client session: {e}")
