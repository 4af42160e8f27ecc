"""Order processing business logic."""
import logging
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from atelier.config.settings import settings
from atelier.core.exceptions import NotFoundError
from atelier.models import Order, OrderStatus, UserProfile
from atelier.schemas.order import OrderCreate
from atelier.services.business.profile_service import ProfileService
from atelier.utils.supabase_helpers import (
    safe_supabase_delete,
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown"
CUSTOMER_ORDER_FIELDS = "id, dress_type, status, delivery_date, created_at, notes"
STAFF_ORDER_FIELDS = "*, users!orders_user_id_fkey(name)"


class OrderService:
    """Service for managing orders - single entry point for all order operations."""

    def __init__(self, supabase: Optional[AsyncClient]):
        self.supabase = supabase

    async def list_for_staff(self) -> List[Dict[str, Any]]:
        """
        All orders, newest first, each carrying `customer_name`.

        Falls back to a plain select if the join to users is rejected.
        """
        if self.supabase is None:
            return []
        try:
            response = await (
                self.supabase.table("orders")
                .select(STAFF_ORDER_FIELDS)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Order join failed, falling back to plain select: {e}")
            rows = await safe_supabase_select(self.supabase, "orders")
            return [{**row, "customer_name": UNKNOWN_CUSTOMER} for row in rows]

        return [_flatten_customer(row) for row in response.data or []]

    async def list_for_customer(self, user_id: str) -> List[Dict[str, Any]]:
        return await safe_supabase_select(
            self.supabase, "orders", CUSTOMER_ORDER_FIELDS, filters={"user_id": user_id}
        )

    async def customer_name(self, user_id: Optional[str]) -> str:
        if self.supabase is None or not user_id:
            return UNKNOWN_CUSTOMER
        profile = await ProfileService(self.supabase).get_profile(user_id)
        return profile.name if profile and profile.name else UNKNOWN_CUSTOMER

    async def create_order(self, order_data: OrderCreate, staff: UserProfile) -> Dict[str, Any]:
        """
        Create an order for the customer registered under `customer_email`.

        Raises:
            NotFoundError: no account uses that email; nothing is written.
        """
        try:
            customer = await ProfileService(self.supabase).find_by_email(order_data.customer_email)
        except Exception as e:
            logger.warning(f"Customer lookup failed for {order_data.customer_email}: {e}")
            customer = None

        if customer is None:
            raise NotFoundError("Customer not found.")

        order = Order(
            user_id=customer.id,
            business_id=staff.business_id or settings.BUSINESS_ID,
            dress_type=order_data.dress_type,
            fabric_type=order_data.fabric_type,
            price=order_data.price,
            delivery_date=order_data.delivery_date,
            urgency_level=order_data.urgency_level,
            notes=order_data.notes,
            status=OrderStatus.ORDER_CONFIRMED,
        )
        row = await safe_supabase_insert(self.supabase, Order.table_name, order.to_supabase_dict())
        logger.info(f"Order {row.get('id')} created for {customer.email} by {staff.email}")
        return {**row, "customer_name": customer.name or UNKNOWN_CUSTOMER}

    async def update_status(self, order_id: str, status: OrderStatus) -> Dict[str, Any]:
        row = await safe_supabase_update(self.supabase, "orders", {"status": status.value}, "id", order_id)
        logger.info(f"Order {order_id} moved to {status.value}")
        return row

    async def delete_order(self, order_id: str) -> Dict[str, Any]:
        row = await safe_supabase_delete(self.supabase, "orders", "id", order_id)
        logger.info(f"Order {order_id} deleted")
        return row


def _flatten_customer(row: Dict[str, Any]) -> Dict[str, Any]:
    joined = row.pop("users", None) if isinstance(row, dict) else None
    name = joined.get("name") if isinstance(joined, dict) else None
    return {**row, "customer_name": name or UNKNOWN_CUSTOMER}
