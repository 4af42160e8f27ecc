"""Staff dashboard: every order, appointment and contact message, live."""
import logging
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from atelier.services.business.appointment_service import AppointmentService
from atelier.services.business.contact_service import ContactService
from atelier.services.business.order_service import UNKNOWN_CUSTOMER, OrderService
from atelier.services.dashboards.base import DashboardView, Publisher
from atelier.services.dashboards.metrics import ALL_STATUSES, admin_metrics, filter_orders
from atelier.services.notifications import NotificationCenter
from atelier.services.realtime import ChangeEvent, ChangeType, Inserted, Updated

logger = logging.getLogger(__name__)


class AdminDashboardView(DashboardView):
    name = "admin"

    def __init__(
        self,
        supabase: Optional[AsyncClient],
        notifications: Optional[NotificationCenter] = None,
        publish: Optional[Publisher] = None,
        status_filter: str = ALL_STATUSES,
    ):
        super().__init__(supabase, notifications, publish)
        self.status_filter = status_filter
        self.orders = self.add_list("orders")
        self.appointments = self.add_list("appointments")
        self.messages = self.add_list("messages")

    def loaders(self):
        return {
            "orders": OrderService(self.supabase).list_for_staff,
            "appointments": AppointmentService(self.supabase).list_all,
            "messages": ContactService(self.supabase).list_all,
        }

    def subscription_targets(self) -> List[Dict[str, Any]]:
        return [
            {"name": "admin-orders", "table": "orders", "handler": self.on_order_change},
            {"name": "admin-appointments", "table": "appointments", "handler": self.on_appointment_change},
        ]

    def on_order_change(self, event: ChangeEvent) -> None:
        if isinstance(event, Inserted):
            row = {**event.row, "customer_name": event.row.get("customer_name") or UNKNOWN_CUSTOMER}
            self.orders.apply(Inserted(row))
            self.notify("📦 New order received!", "info")
            if row["customer_name"] == UNKNOWN_CUSTOMER and row.get("user_id"):
                self.spawn(self._resolve_customer_name(row["id"], row["user_id"]))
            return
        self.orders.apply(event)

    async def _resolve_customer_name(self, order_id: Any, user_id: str) -> None:
        name = await OrderService(self.supabase).customer_name(user_id)
        if name != UNKNOWN_CUSTOMER:
            self.orders.apply(Updated({"id": order_id, "customer_name": name}))

    def on_appointment_change(self, event: ChangeEvent) -> None:
        self.appointments.apply(event)
        if event.type is ChangeType.INSERT:
            self.notify(f"📅 New appointment from {event.row.get('name') or 'Guest'}!", "info")

    def set_filter(self, status: Optional[str]) -> None:
        self.status_filter = status or ALL_STATUSES
        self._publish({"type": "snapshot", "data": self.snapshot()})

    def snapshot(self) -> Dict[str, Any]:
        orders = self.orders.rows
        appointments = self.appointments.rows
        messages = self.messages.rows
        return {
            "loading": self.loading,
            "status_filter": self.status_filter,
            "orders": filter_orders(orders, self.status_filter),
            "appointments": appointments,
            "messages": messages,
            "metrics": admin_metrics(orders, appointments),
            "tabs": {
                "orders": len(orders),
                "appointments": sum(1 for a in appointments if a.get("status") == "Pending"),
                "messages": len(messages),
            },
        }
