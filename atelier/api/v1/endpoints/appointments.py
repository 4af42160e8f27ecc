"""Appointment booking (customers) and triage (staff)."""
from typing import Any, List
import logging

from fastapi import APIRouter, Depends, status

from atelier.core.dependencies import get_supabase, get_writable_supabase, require_role, submission_key
from atelier.core.exceptions import BackendError
from atelier.core.forms import submissions
from atelier.core.route_guard import CUSTOMER_PATH
from atelier.models import UserProfile, UserRole
from atelier.schemas.appointment import AppointmentResponse, AppointmentStatusUpdate, BookingRequest
from atelier.schemas.common import FormResult, NotificationPayload
from atelier.services.business.appointment_service import AppointmentService, validate_booking

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=FormResult)
async def book_appointment(
    booking: BookingRequest,
    supabase=Depends(get_writable_supabase),
    profile: UserProfile = Depends(require_role(UserRole.CUSTOMER.value)),
) -> Any:
    """
    Book an appointment for the signed-in customer.

    Name, email and phone come from the customer's profile. A missing
    service is rejected before anything is sent to the backend.
    """
    validate_booking(booking)
    service = AppointmentService(supabase)
    async with submissions.submitting(submission_key("booking", profile)):
        try:
            row = await service.book(booking, profile)
        except BackendError as e:
            raise BackendError(f"Failed to book appointment: {e.message}")

    return FormResult(
        redirect_to=CUSTOMER_PATH,
        notification=NotificationPayload(message="🎉 Appointment booked successfully! We'll confirm soon."),
        data=row,
    )


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    profile: UserProfile = Depends(require_role(UserRole.ADMIN.value)),
    supabase=Depends(get_supabase),
) -> Any:
    return await AppointmentService(supabase).list_all()


@router.patch("/{appointment_id}/status", response_model=FormResult)
async def update_appointment_status(
    appointment_id: str,
    update: AppointmentStatusUpdate,
    supabase=Depends(get_writable_supabase),
    profile: UserProfile = Depends(require_role(UserRole.ADMIN.value)),
) -> Any:
    try:
        row = await AppointmentService(supabase).update_status(appointment_id, update.status)
    except BackendError:
        raise BackendError("Failed to update appointment")

    return FormResult(
        notification=NotificationPayload(message=f"Appointment {update.status.value}"),
        data=row,
    )
