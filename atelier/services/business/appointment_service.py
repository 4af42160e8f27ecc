"""Appointment booking and staff triage."""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from atelier.core.exceptions import FormValidationError
from atelier.models import Appointment, AppointmentStatus, UserProfile
from atelier.schemas.appointment import BookingRequest
from atelier.utils.supabase_helpers import (
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)

CUSTOMER_APPOINTMENT_FIELDS = "id, service_type, preferred_date, message, status, created_at"


def validate_booking(booking: BookingRequest, today: Optional[date] = None) -> None:
    """Form-level checks that run before any backend call."""
    if not booking.service_type:
        raise FormValidationError("Please select a service")
    today = today or date.today()
    if booking.preferred_date and booking.preferred_date < today:
        raise FormValidationError("Preferred date cannot be in the past")


class AppointmentService:

    def __init__(self, supabase: Optional[AsyncClient]):
        self.supabase = supabase

    async def list_all(self) -> List[Dict[str, Any]]:
        return await safe_supabase_select(self.supabase, "appointments")

    async def list_for_customer(self, user_id: str) -> List[Dict[str, Any]]:
        return await safe_supabase_select(
            self.supabase, "appointments", CUSTOMER_APPOINTMENT_FIELDS, filters={"user_id": user_id}
        )

    async def book(self, booking: BookingRequest, profile: UserProfile) -> Dict[str, Any]:
        """Insert a Pending appointment carrying the customer's contact details."""
        validate_booking(booking)
        appointment = Appointment(
            user_id=profile.id,
            name=profile.name or "Guest",
            email=profile.email or "",
            phone=profile.phone,
            service_type=booking.service_type,
            preferred_date=booking.preferred_date,
            message=booking.message,
            status=AppointmentStatus.PENDING,
        )
        row = await safe_supabase_insert(self.supabase, Appointment.table_name, appointment.to_supabase_dict())
        logger.info(f"Appointment {row.get('id')} booked by {profile.email} for {booking.service_type}")
        return row

    async def update_status(self, appointment_id: str, status: AppointmentStatus) -> Dict[str, Any]:
        row = await safe_supabase_update(
            self.supabase, "appointments", {"status": status.value}, "id", appointment_id
        )
        logger.info(f"Appointment {appointment_id} marked {status.value}")
        return row
