"""Supabase session token transport (Bearer header or cookies)."""
import logging
from typing import Mapping, Optional, Tuple

from fastapi import Response

from atelier.config.settings import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
REFRESH_TOKEN_HEADER = "X-Refresh-Token"


def extract_tokens(
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
    query_params: Optional[Mapping[str, str]] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Find the caller's access and refresh tokens.

    Order of precedence: `Authorization: Bearer`, then cookies, then a
    `token` query parameter (browsers cannot set headers on WebSockets).
    """
    access_token = None
    authorization = headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        access_token = authorization.split("Bearer ", 1)[1].strip() or None
    if not access_token:
        access_token = cookies.get(ACCESS_TOKEN_COOKIE)
    if not access_token and query_params is not None:
        access_token = query_params.get("token")

    refresh_token = headers.get(REFRESH_TOKEN_HEADER.lower()) or cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token and query_params is not None:
        refresh_token = query_params.get("refresh_token")
    return access_token, refresh_token


def set_session_cookies(response: Response, session) -> None:
    """Persist the session so that page routes can restore it."""
    secure = settings.ENVIRONMENT.lower() == "production"
    max_age = getattr(session, "expires_in", None) or 3600
    response.set_cookie(
        ACCESS_TOKEN_COOKIE, session.access_token,
        max_age=max_age, httponly=True, secure=secure, samesite="lax",
    )
    if getattr(session, "refresh_token", None):
        response.set_cookie(
            REFRESH_TOKEN_COOKIE, session.refresh_token,
            httponly=True, secure=secure, samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
