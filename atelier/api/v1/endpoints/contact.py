"""Public contact form and the staff inbox."""
from typing import Any, List
import logging

from fastapi import APIRouter, Depends, status

from atelier.core.dependencies import get_supabase, get_writable_supabase, require_role, submission_key
from atelier.core.exceptions import BackendError
from atelier.core.forms import submissions
from atelier.models import UserProfile, UserRole
from atelier.schemas.common import FormResult, NotificationPayload
from atelier.schemas.contact import ContactMessageResponse, ContactRequest
from atelier.services.business.contact_service import ContactService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=FormResult)
async def send_message(
    message: ContactRequest,
    supabase=Depends(get_writable_supabase),
) -> Any:
    async with submissions.submitting(submission_key("contact", email=message.email)):
        try:
            row = await ContactService(supabase).submit(message)
        except BackendError:
            raise BackendError("Failed to send message. Please try again.")

    return FormResult(
        notification=NotificationPayload(message="Message sent! We'll get back to you soon."),
        data=row,
    )


@router.get("", response_model=List[ContactMessageResponse])
async def list_messages(
    profile: UserProfile = Depends(require_role(UserRole.ADMIN.value)),
    supabase=Depends(get_supabase),
) -> Any:
    return await ContactService(supabase).list_all()
