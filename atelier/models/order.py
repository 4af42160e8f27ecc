"""Tailoring order model using Supabase."""
from enum import Enum
from typing import Optional

from atelier.models.base import SupabaseModel


class OrderStatus(str, Enum):
    """Order status enumeration, in workshop order."""
    ORDER_CONFIRMED = "Order Confirmed"
    CUTTING = "Cutting"
    STITCHING = "Stitching"
    TRIAL = "Trial"
    READY = "Ready"
    DELIVERED = "Delivered"


class UrgencyLevel(str, Enum):
    NORMAL = "Normal"
    URGENT = "Urgent"
    EXPRESS = "Express"


# Percent complete shown on the customer's progress bar
STATUS_PROGRESS = {
    OrderStatus.ORDER_CONFIRMED.value: 15,
    OrderStatus.CUTTING.value: 30,
    OrderStatus.STITCHING.value: 55,
    OrderStatus.TRIAL.value: 75,
    OrderStatus.READY.value: 90,
    OrderStatus.DELIVERED.value: 100,
}
UNKNOWN_STATUS_PROGRESS = 10

IN_PROGRESS_STATUSES = frozenset({
    OrderStatus.CUTTING.value,
    OrderStatus.STITCHING.value,
    OrderStatus.TRIAL.value,
})
FINISHED_STATUSES = frozenset({OrderStatus.READY.value, OrderStatus.DELIVERED.value})


def status_progress(status: Optional[str]) -> int:
    return STATUS_PROGRESS.get(status, UNKNOWN_STATUS_PROGRESS)


class Order(SupabaseModel):
    """A garment order owned by one customer."""
    table_name = "orders"
    nullable_fields = ("fabric_type", "price", "delivery_date", "notes", "business_id")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.user_id = kwargs.get('user_id')
        self.business_id = kwargs.get('business_id')
        self.dress_type = kwargs.get('dress_type')
        self.fabric_type = kwargs.get('fabric_type')
        self.price = kwargs.get('price')
        self.status = kwargs.get('status', OrderStatus.ORDER_CONFIRMED.value)
        self.urgency_level = kwargs.get('urgency_level', UrgencyLevel.NORMAL.value)
        self.delivery_date = kwargs.get('delivery_date')
        self.notes = kwargs.get('notes')
        self.created_at = kwargs.get('created_at')
