"""Request dependencies: session, client and role checks."""
import logging
from typing import AsyncIterator, Callable, Hashable, Optional

from fastapi import Depends, Request
from supabase import AsyncClient

from atelier.config.database import close_supabase_client, get_authenticated_supabase_client, require_client
from atelier.core import route_guard
from atelier.core.exceptions import AuthenticationError, AuthorizationError
from atelier.core.route_guard import GuardState
from atelier.core.session import SessionProvider
from atelier.core.supabase_auth import extract_tokens
from atelier.models import UserProfile

logger = logging.getLogger(__name__)


async def build_session(access_token: Optional[str], refresh_token: Optional[str]) -> SessionProvider:
    client = await get_authenticated_supabase_client(access_token, refresh_token)
    provider = SessionProvider(client)
    await provider.initialize()
    return provider


async def release_session(provider: SessionProvider) -> None:
    """Tear down a provider and close the client it was built on."""
    await provider.teardown()
    await close_supabase_client(provider.client)


async def get_session(request: Request) -> AsyncIterator[SessionProvider]:
    """
    The caller's session for the duration of one request.

    The provider is built from the request's tokens, restored once and torn
    down, with its client closed, when the response is done.
    """
    access_token, refresh_token = extract_tokens(request.headers, request.cookies)
    provider = await build_session(access_token, refresh_token)
    try:
        yield provider
    finally:
        await release_session(provider)


def get_supabase(session: SessionProvider = Depends(get_session)) -> Optional[AsyncClient]:
    """Client for read paths; None when the backend is not configured."""
    return session.client


def get_writable_supabase(session: SessionProvider = Depends(get_session)) -> AsyncClient:
    """Client for mutating paths; fails fast when the backend is not configured."""
    return require_client(session.client)


def require_role(required_role: Optional[str] = None) -> Callable:
    """
    Dependency factory enforcing sign-in and, optionally, a role.

    API routes answer 401/403 here; browser routes use the guard's redirect
    instead (see atelier.api.pages).
    """

    async def dependency(session: SessionProvider = Depends(get_session)) -> UserProfile:
        decision = route_guard.evaluate(session.user, session.profile, session.loading, required_role)
        if decision.state is GuardState.UNAUTHENTICATED:
            raise AuthenticationError("Please sign in to continue.")
        if decision.state is GuardState.WRONG_ROLE:
            raise AuthorizationError("You do not have access to this page.")
        if session.profile is None:
            raise AuthenticationError("Your profile could not be loaded.")
        return session.profile

    return dependency


def submission_key(form: str, profile: Optional[UserProfile] = None, email: Optional[str] = None) -> Hashable:
    """
    Key of one caller's submission of one form.

    Signed-in callers are keyed by profile id. Anonymous forms (login,
    register, contact) are keyed by the email they submit, so visitors behind
    one address never share a flag.
    """
    who = profile.id if profile else (email or "").strip().lower()
    return (who, form)
