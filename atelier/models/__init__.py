"""
Database models package.

This file makes it easy to import all models at once.
"""

from .base import SupabaseModel
from .user import UserProfile, UserRole, STAFF_ROLES
from .order import Order, OrderStatus, UrgencyLevel, status_progress
from .appointment import Appointment, AppointmentStatus
from .contact_message import ContactMessage
from .measurement import Measurements, MEASUREMENT_FIELDS
from .catalog import ServiceOption, SERVICE_OPTIONS, SERVICE_NAMES

__all__ = [
    "SupabaseModel",
    "UserProfile",
    "UserRole",
    "STAFF_ROLES",
    "Order",
    "OrderStatus",
    "UrgencyLevel",
    "status_progress",
    "Appointment",
    "AppointmentStatus",
    "ContactMessage",
    "Measurements",
    "MEASUREMENT_FIELDS",
    "ServiceOption",
    "SERVICE_OPTIONS",
    "SERVICE_NAMES",
]
