"""Customer measurement profile endpoints."""
from typing import Any
import logging

from fastapi import APIRouter, Depends

from atelier.core.dependencies import get_supabase, get_writable_supabase, require_role, submission_key
from atelier.core.exceptions import BackendError
from atelier.core.forms import submissions
from atelier.models import UserProfile, UserRole
from atelier.schemas.common import FormResult, NotificationPayload
from atelier.schemas.measurements import MeasurementsResponse, MeasurementsUpdate
from atelier.services.business.measurement_service import MeasurementService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=MeasurementsResponse)
async def get_measurements(
    profile: UserProfile = Depends(require_role(UserRole.CUSTOMER.value)),
    supabase=Depends(get_supabase),
) -> Any:
    """The caller's saved measurements; every value is null when none are saved."""
    row = await MeasurementService(supabase).get_for_user(profile.id)
    return row or MeasurementsResponse(user_id=profile.id)


@router.put("", response_model=FormResult)
async def save_measurements(
    update: MeasurementsUpdate,
    supabase=Depends(get_writable_supabase),
    profile: UserProfile = Depends(require_role(UserRole.CUSTOMER.value)),
) -> Any:
    """Update the caller's measurements, creating the profile on first save."""
    service = MeasurementService(supabase)
    existed = await service.get_for_user(profile.id) is not None

    async with submissions.submitting(submission_key("measurements", profile)):
        try:
            row = await service.save(profile.id, update)
        except BackendError:
            verb = "update" if existed else "save"
            raise BackendError(f"Failed to {verb} measurements")

    verb = "updated" if existed else "saved"
    return FormResult(
        notification=NotificationPayload(message=f"Measurements {verb} successfully!"),
        data=row,
    )
