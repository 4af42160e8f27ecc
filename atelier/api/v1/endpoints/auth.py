"""
Authentication endpoints backed by Supabase Auth: password sign-in,
customer registration, Google OAuth, sign-out and session inspection.
"""
from typing import Any
import logging

from fastapi import APIRouter, Depends, Response, status

from atelier.config.database import require_client
from atelier.config.settings import settings
from atelier.core.dependencies import get_session, submission_key
from atelier.core.forms import submissions
from atelier.core.route_guard import CUSTOMER_PATH, LOGIN_PATH, home_for_role
from atelier.core.session import SessionProvider
from atelier.core.supabase_auth import clear_session_cookies, set_session_cookies
from atelier.schemas.auth import (
    LoginRequest,
    OAuthResponse,
    ProfileResponse,
    RegisterRequest,
    SessionResponse,
    TokenResponse,
)
from atelier.schemas.common import FormResult, NotificationPayload

logger = logging.getLogger(__name__)
router = APIRouter()

REGISTERED_MESSAGE = "Account created! Please check your email to confirm, then sign in."


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    session: SessionProvider = Depends(get_session),
) -> Any:
    """
    Sign in with email and password.

    Sets the session cookies used by the page routes and tells the client
    where to go next: staff to /admin, customers to /dashboard.
    """
    require_client(session.client)
    async with submissions.submitting(submission_key("login", email=credentials.email)):
        profile = await session.sign_in(credentials.email, credentials.password)

    auth_session = session.session
    set_session_cookies(response, auth_session)
    logger.info(f"User {profile.email} signed in as {profile.role}")

    return TokenResponse(
        access_token=auth_session.access_token,
        refresh_token=getattr(auth_session, "refresh_token", None),
        user_id=session.user_id,
        email=profile.email or credentials.email,
        role=profile.role,
        business_id=profile.business_id,
        expires_in=getattr(auth_session, "expires_in", None) or 3600,
        redirect_to=home_for_role(profile.role),
        notification=NotificationPayload(message="Welcome back! 👋"),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=FormResult)
async def register(
    payload: RegisterRequest,
    session: SessionProvider = Depends(get_session),
) -> Any:
    """
    Register a customer account.

    The account is not signed in: the customer confirms their email and
    then signs in from /login.
    """
    require_client(session.client)
    async with submissions.submitting(submission_key("register", email=payload.email)):
        user = await session.sign_up(payload.email, payload.password, payload.name, payload.phone)

    logger.info(f"Registered {payload.email} ({getattr(user, 'id', 'pending confirmation')})")
    return FormResult(
        redirect_to=LOGIN_PATH,
        message=REGISTERED_MESSAGE,
        notification=NotificationPayload(message="Account created successfully! 🎉"),
    )


@router.post("/google", response_model=OAuthResponse)
async def google_sign_in(session: SessionProvider = Depends(get_session)) -> Any:
    """Start Google sign-in; the provider sends the user back to /dashboard."""
    redirect_to = f"{settings.SITE_URL.rstrip('/')}{CUSTOMER_PATH}"
    url = await session.sign_in_with_google(redirect_to)
    return OAuthResponse(url=url)


@router.post("/logout", response_model=FormResult)
async def logout(response: Response, session: SessionProvider = Depends(get_session)) -> Any:
    await session.sign_out()
    clear_session_cookies(response)
    return FormResult()


@router.get("/session", response_model=SessionResponse)
async def current_session(session: SessionProvider = Depends(get_session)) -> Any:
    """The caller's identity and profile as restored from their tokens."""
    profile = ProfileResponse(**session.profile.to_dict()) if session.profile else None
    return SessionResponse(
        loading=session.loading,
        user_id=session.user_id,
        email=getattr(session.user, "email", None),
        profile=profile,
    )
