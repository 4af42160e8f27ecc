"""Customer measurement profile."""
import logging
from typing import Any, Dict, Optional

from supabase import AsyncClient

from atelier.core.exceptions import BackendError, backend_message
from atelier.models import MEASUREMENT_FIELDS, Measurements
from atelier.schemas.measurements import MeasurementsUpdate

logger = logging.getLogger(__name__)


class MeasurementService:

    def __init__(self, supabase: Optional[AsyncClient]):
        self.supabase = supabase

    async def get_for_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """The customer's saved profile, or None (also on read failure)."""
        if self.supabase is None:
            return None
        try:
            response = await (
                self.supabase.table("measurements").select("*").eq("user_id", user_id).limit(1).execute()
            )
        except Exception as e:
            logger.warning(f"Measurements read failed for {user_id}: {e}")
            return None
        return response.data[0] if response.data else None

    async def save(self, user_id: str, update: MeasurementsUpdate) -> Dict[str, Any]:
        """Update the existing profile or insert the first one."""
        measurements = Measurements(user_id=user_id, **update.model_dump())
        payload = measurements.to_supabase_dict()
        existing = await self.get_for_user(user_id)

        try:
            if existing and existing.get("id"):
                query = self.supabase.table("measurements").update(payload).eq("id", existing["id"])
            else:
                query = self.supabase.table("measurements").insert(payload)
            response = await query.execute()
        except Exception as e:
            logger.error(f"Failed to save measurements for {user_id}: {e}")
            raise BackendError(backend_message(e))

        if not response.data:
            raise BackendError("Failed to save measurements")
        logger.info(f"Measurements saved for {user_id}")
        return response.data[0]


def measurement_values(row: Optional[Dict[str, Any]]) -> Dict[str, Optional[float]]:
    row = row or {}
    return {field: row.get(field) for field in MEASUREMENT_FIELDS}
