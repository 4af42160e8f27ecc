"""Profile row access (public.users)."""
import logging
from typing import Optional

from supabase import AsyncClient

from atelier.models import UserProfile, UserRole

logger = logging.getLogger(__name__)


class ProfileService:
    """Reads and writes the application-level user profile."""

    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Fetch one profile by auth user id; any failure reads as "no profile"."""
        try:
            response = await self.supabase.table("users").select("*").eq("id", user_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching profile for {user_id}: {e}")
            return None

        if not response.data:
            logger.warning(f"No profile row for user {user_id}")
            return None
        return UserProfile.from_dict(response.data[0])

    async def find_by_email(self, email: str) -> Optional[UserProfile]:
        response = await self.supabase.table("users").select("*").eq("email", email).limit(1).execute()
        if not response.data:
            return None
        return UserProfile.from_dict(response.data[0])

    async def upsert_customer_profile(
        self,
        user_id: str,
        name: str,
        email: str,
        phone: Optional[str],
    ) -> None:
        """Create or overwrite the profile row written at registration."""
        await self.supabase.table("users").upsert(
            {
                "id": user_id,
                "name": name,
                "email": email,
                "phone": phone,
                "role": UserRole.CUSTOMER.value,
            },
            on_conflict="id",
        ).execute()
