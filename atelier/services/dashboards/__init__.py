"""Live dashboard views."""
from .admin_dashboard import AdminDashboardView
from .customer_dashboard import CustomerDashboardView
from .base import DashboardView

__all__ = ["AdminDashboardView", "CustomerDashboardView", "DashboardView"]
