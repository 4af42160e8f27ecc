"""Order management endpoints."""
from typing import Any, List
import logging

from fastapi import APIRouter, Depends, status

from atelier.core.dependencies import get_supabase, get_writable_supabase, require_role, submission_key
from atelier.core.exceptions import BackendError
from atelier.core.forms import submissions
from atelier.models import UserProfile, UserRole
from atelier.schemas.common import FormResult, NotificationPayload
from atelier.schemas.order import OrderCreate, OrderResponse, OrderStatusUpdate
from atelier.services.business.order_service import OrderService
from atelier.services.dashboards.metrics import with_progress

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    profile: UserProfile = Depends(require_role()),
    supabase=Depends(get_supabase),
) -> Any:
    """
    Orders visible to the caller, newest first.

    Staff see every order with the customer's name; customers see their own
    orders with a progress percentage.
    """
    service = OrderService(supabase)
    if profile.is_staff:
        return await service.list_for_staff()
    return with_progress(await service.list_for_customer(profile.id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=FormResult)
async def create_order(
    order_data: OrderCreate,
    supabase=Depends(get_writable_supabase),
    staff: UserProfile = Depends(require_role(UserRole.ADMIN.value)),
) -> Any:
    """
    Create an order for a registered customer, looked up by email.

    Nothing is written when no account uses the email.
    """
    async with submissions.submitting(submission_key("new-order", staff)):
        row = await OrderService(supabase).create_order(order_data, staff)

    return FormResult(
        notification=NotificationPayload(message="Order created successfully!"),
        data=row,
    )


@router.patch("/{order_id}/status", response_model=FormResult)
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    supabase=Depends(get_writable_supabase),
    staff: UserProfile = Depends(require_role(UserRole.ADMIN.value)),
) -> Any:
    try:
        row = await OrderService(supabase).update_status(order_id, update.status)
    except BackendError:
        raise BackendError("Failed to update status")

    return FormResult(
        notification=NotificationPayload(message=f"Status updated to: {update.status.value}"),
        data=row,
    )


@router.delete("/{order_id}", response_model=FormResult)
async def delete_order(
    order_id: str,
    supabase=Depends(get_writable_supabase),
    staff: UserProfile = Depends(require_role(UserRole.ADMIN.value)),
) -> Any:
    try:
        row = await OrderService(supabase).delete_order(order_id)
    except BackendError as e:
        raise BackendError(f"Failed to delete order: {e.message}")

    return FormResult(
        notification=NotificationPayload(message=f'Order "{row.get("dress_type")}" deleted.'),
        data=row,
    )
