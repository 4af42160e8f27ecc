"""Customer dashboard: the caller's own orders, appointments and measurements."""
import logging
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from atelier.models import UserProfile
from atelier.services.business.appointment_service import AppointmentService
from atelier.services.business.measurement_service import MeasurementService, measurement_values
from atelier.services.business.order_service import OrderService
from atelier.services.dashboards.base import DashboardView, Publisher
from atelier.services.dashboards.metrics import customer_stats, with_progress
from atelier.services.notifications import NotificationCenter
from atelier.services.realtime import ChangeEvent, ChangeType, Deleted, Inserted, Updated

logger = logging.getLogger(__name__)


class CustomerDashboardView(DashboardView):
    name = "customer"

    def __init__(
        self,
        supabase: Optional[AsyncClient],
        profile: UserProfile,
        notifications: Optional[NotificationCenter] = None,
        publish: Optional[Publisher] = None,
    ):
        super().__init__(supabase, notifications, publish)
        self.profile = profile
        self.orders = self.add_list("orders")
        self.appointments = self.add_list("appointments")
        self.measurements: Optional[Dict[str, Any]] = None

    def loaders(self):
        return {
            "orders": lambda: OrderService(self.supabase).list_for_customer(self.profile.id),
            "appointments": lambda: AppointmentService(self.supabase).list_for_customer(self.profile.id),
        }

    async def load(self) -> None:
        measurements = await MeasurementService(self.supabase).get_for_user(self.profile.id)
        if not self.unmounted:
            self.measurements = measurements
        await super().load()

    def subscription_targets(self) -> List[Dict[str, Any]]:
        scope = {"user_id": self.profile.id}
        return [
            {
                "name": f"customer-orders-{self.profile.id}",
                "table": "orders",
                "handler": self.on_order_change,
                "scope": scope,
            },
            {
                "name": f"customer-appointments-{self.profile.id}",
                "table": "appointments",
                "handler": self.on_appointment_change,
                "event": ChangeType.UPDATE,
                "scope": scope,
            },
        ]

    def on_order_change(self, event: ChangeEvent) -> None:
        self.orders.apply(event)
        if isinstance(event, Inserted):
            self.notify(f"New order placed: {event.row.get('dress_type')}", "info")
        elif isinstance(event, Updated):
            current = self.orders.get(event.id) or event.row
            self.notify(
                f'Order "{current.get("dress_type")}" updated to: {current.get("status")}', "success"
            )
        elif isinstance(event, Deleted):
            self.notify("An order was removed.", "info")

    def on_appointment_change(self, event: ChangeEvent) -> None:
        if not isinstance(event, Updated):
            return
        self.appointments.apply(event)
        current = self.appointments.get(event.id) or event.row
        self.notify(f"Appointment {current.get('status')}: {current.get('service_type')}", "success")

    def snapshot(self) -> Dict[str, Any]:
        orders = self.orders.rows
        appointments = self.appointments.rows
        has_measurements = self.measurements is not None
        return {
            "loading": self.loading,
            "profile": {"id": self.profile.id, "name": self.profile.name, "email": self.profile.email},
            "orders": with_progress(orders),
            "appointments": appointments,
            "measurements": measurement_values(self.measurements),
            "has_measurements": has_measurements,
            "stats": customer_stats(orders, appointments, has_measurements),
        }
