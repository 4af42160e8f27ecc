"""Appointment model for fitting and consultation requests using Supabase."""
from enum import Enum

from atelier.models.base import SupabaseModel


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Appointment(SupabaseModel):
    """Appointment request, optionally linked to a registered user."""
    table_name = "appointments"
    nullable_fields = ("user_id", "phone", "preferred_date", "message")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.user_id = kwargs.get('user_id')
        self.name = kwargs.get('name')
        self.email = kwargs.get('email')
        self.phone = kwargs.get('phone')
        self.service_type = kwargs.get('service_type')
        self.preferred_date = kwargs.get('preferred_date')
        self.message = kwargs.get('message')
        self.status = kwargs.get('status', AppointmentStatus.PENDING.value)
        self.created_at = kwargs.get('created_at')
