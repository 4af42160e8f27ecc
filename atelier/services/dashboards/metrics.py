"""Counters and figures shown on the dashboards."""
from typing import Any, Dict, Iterable, List, Optional

from atelier.models.appointment import AppointmentStatus
from atelier.models.order import (
    FINISHED_STATUSES,
    IN_PROGRESS_STATUSES,
    OrderStatus,
    status_progress,
)

ALL_STATUSES = "All"


def format_currency(value: float) -> str:
    """Compact rupee amount: ₹1.2L, ₹4.5K, ₹999."""
    if value >= 100000:
        return f"₹{value / 100000:.1f}L"
    if value >= 1000:
        return f"₹{value / 1000:.1f}K"
    return f"₹{value:.0f}"


def admin_metrics(orders: Iterable[Dict[str, Any]], appointments: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    orders = list(orders)
    revenue = sum(order.get("price") or 0 for order in orders)
    return {
        "pending": sum(1 for o in orders if o.get("status") == OrderStatus.ORDER_CONFIRMED.value),
        "in_progress": sum(1 for o in orders if o.get("status") in IN_PROGRESS_STATUSES),
        "completed": sum(1 for o in orders if o.get("status") in FINISHED_STATUSES),
        "revenue": revenue,
        "revenue_display": format_currency(revenue),
        "pending_appointments": sum(
            1 for a in appointments if a.get("status") == AppointmentStatus.PENDING.value
        ),
    }


def filter_orders(orders: List[Dict[str, Any]], status: Optional[str]) -> List[Dict[str, Any]]:
    if not status or status == ALL_STATUSES:
        return list(orders)
    return [order for order in orders if order.get("status") == status]


def customer_stats(
    orders: Iterable[Dict[str, Any]],
    appointments: Iterable[Dict[str, Any]],
    has_measurements: bool,
) -> Dict[str, int]:
    orders = list(orders)
    delivered = OrderStatus.DELIVERED.value
    return {
        "active_orders": sum(1 for o in orders if o.get("status") != delivered),
        "completed_orders": sum(1 for o in orders if o.get("status") == delivered),
        "appointments": len(list(appointments)),
        "saved_profiles": 1 if has_measurements else 0,
    }


def with_progress(orders: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{**order, "progress": status_progress(order.get("status"))} for order in orders]
