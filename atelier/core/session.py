"""Session / identity provider.

Owns one caller's auth state for the lifetime of a request or a socket:
restores the persisted session, loads the profile, follows auth state
changes and exposes the sign-in/up/out operations.
"""
import asyncio
import logging
from typing import Any, Optional, Set

from supabase import AsyncClient

from atelier.core.exceptions import (
    AuthenticationError,
    BackendNotConfiguredError,
    backend_message,
)
from atelier.models import UserProfile
from atelier.services.business.profile_service import ProfileService

logger = logging.getLogger(__name__)


class SessionProvider:
    """
    Holds `user`, `profile`, `session` and `loading` for one caller.

    `loading` stays True until the first restoration attempt finishes, then
    never goes back. Without a backend it starts False and every mutating
    call raises BackendNotConfiguredError.
    """

    def __init__(self, client: Optional[AsyncClient]):
        self.client = client
        self.user: Optional[Any] = None
        self.profile: Optional[UserProfile] = None
        self.session: Optional[Any] = None
        self.loading: bool = client is not None

        self._initialized = False
        self._subscription = None
        self._profile_tasks: Set[asyncio.Task] = set()

    @property
    def configured(self) -> bool:
        return self.client is not None

    @property
    def user_id(self) -> Optional[str]:
        return getattr(self.user, "id", None)

    def _require_client(self) -> AsyncClient:
        if self.client is None:
            raise BackendNotConfiguredError()
        return self.client

    async def initialize(self) -> None:
        """Restore the persisted session once; later calls are no-ops."""
        if self.client is None or self._initialized:
            return
        self._initialized = True

        try:
            session = await self.client.auth.get_session()
            self._apply_session(session)
            if self.user_id:
                self.profile = await ProfileService(self.client).get_profile(self.user_id) or self._fallback_profile()
        except Exception as e:
            logger.error(f"Failed to get session: {e}")
        finally:
            self.loading = False

        try:
            self._subscription = self.client.auth.on_auth_state_change(self._on_auth_state_change)
        except Exception as e:
            logger.warning(f"Could not subscribe to auth state changes: {e}")

    async def teardown(self) -> None:
        """Release the auth listener and drop any pending profile loads."""
        if self._subscription is not None:
            try:
                self._subscription.unsubscribe()
            except Exception as e:
                logger.warning(f"Failed to unsubscribe auth listener: {e}")
            self._subscription = None

        for task in list(self._profile_tasks):
            task.cancel()
        self._profile_tasks.clear()

    def _fallback_profile(self) -> UserProfile:
        """Minimal customer profile built from the auth identity and its metadata."""
        metadata = getattr(self.user, "user_metadata", None) or {}
        return UserProfile(
            id=self.user_id,
            email=getattr(self.user, "email", None),
            name=metadata.get("name"),
            phone=metadata.get("phone"),
        )

    def _apply_session(self, session: Optional[Any]) -> None:
        self.session = session
        self.user = getattr(session, "user", None) if session else None

    def _on_auth_state_change(self, event: Any, session: Optional[Any]) -> None:
        previous_user_id = self.user_id
        self._apply_session(session)
        logger.debug(f"Auth state change: {event}")

        if not self.user_id:
            self.profile = None
            return
        if self.user_id == previous_user_id and self.profile is not None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._refresh_profile(self.user_id))
        self._profile_tasks.add(task)
        task.add_done_callback(self._profile_tasks.discard)

    async def _refresh_profile(self, user_id: str) -> None:
        profile = await ProfileService(self._require_client()).get_profile(user_id) or self._fallback_profile()
        # A newer auth change may have replaced the user while we waited
        if self.user_id == user_id:
            self.profile = profile

    async def sign_in(self, email: str, password: str) -> UserProfile:
        client = self._require_client()
        try:
            response = await client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.info(f"Sign-in failed for {email}: {e}")
            raise AuthenticationError(backend_message(e))

        if not response or not response.session:
            raise AuthenticationError("Invalid login credentials")

        self._apply_session(response.session)
        self.profile = await ProfileService(client).get_profile(self.user_id)
        if self.profile is None:
            # Trigger-created profile missing; fall back to the auth identity
            self.profile = self._fallback_profile()
        return self.profile

    async def sign_up(self, email: str, password: str, name: str, phone: Optional[str] = None) -> Any:
        """
        Create the auth identity, then the profile row.

        The profile write is confirmed by reading it back. A failed write is
        logged only, since the backend trigger creates a minimal profile
        from the metadata sent with the sign-up.
        """
        client = self._require_client()
        try:
            response = await client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name, "phone": phone}},
            })
        except Exception as e:
            logger.info(f"Registration failed for {email}: {e}")
            raise AuthenticationError(backend_message(e))

        user = getattr(response, "user", None)
        if user is None:
            return None

        profiles = ProfileService(client)
        try:
            await profiles.upsert_customer_profile(user.id, name, email, phone)
        except Exception as e:
            logger.error(f"Error creating profile: {e}")
            logger.warning("Profile upsert failed, but the DB trigger may have created a basic profile.")
            return user

        if await profiles.get_profile(user.id) is None:
            logger.warning(f"Profile for {user.id} not readable after upsert")
        return user

    async def sign_in_with_google(self, redirect_to: str) -> str:
        """Start the Google OAuth flow and return the provider URL."""
        client = self._require_client()
        try:
            response = await client.auth.sign_in_with_oauth({
                "provider": "google",
                "options": {"redirect_to": redirect_to},
            })
        except Exception as e:
            raise AuthenticationError(backend_message(e))
        return response.url

    async def sign_out(self) -> None:
        """Sign out remotely when possible; local state is always cleared."""
        if self.client is not None:
            try:
                await self.client.auth.sign_out()
            except Exception as e:
                logger.warning(f"Remote sign-out failed: {e}")
        self.user = None
        self.session = None
        self.profile = None
