"""Appointment schemas for API requests and responses."""
from datetime import date
from typing import Optional

from pydantic import BaseModel

from atelier.models.appointment import AppointmentStatus
from atelier.schemas.common import OptionalText


class BookingRequest(BaseModel):
    """
    Customer booking form.

    `service_type` is optional at the schema level so that a missing service
    reaches the form's own validation and gets its friendly message.
    """
    service_type: OptionalText = None
    preferred_date: Optional[date] = None
    message: OptionalText = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "service_type": "Bridal Blouse Stitching",
                "preferred_date": "2026-11-02",
                "message": "Reception blouse, need a trial first"
            }
        }
    }


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    service_type: str
    preferred_date: Optional[str] = None
    message: Optional[str] = None
    status: str
    created_at: Optional[str] = None
