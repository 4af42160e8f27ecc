"""User profile model for Supabase operations."""
import enum
from typing import Optional

from atelier.models.base import SupabaseModel


class UserRole(str, enum.Enum):
    """User roles in the system."""
    CUSTOMER = "customer"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.SUPER_ADMIN)


STAFF_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value})


class UserProfile(SupabaseModel):
    """
    Application-level user record, distinct from the auth identity.

    Created on registration (by a backend trigger, by the client upsert, or
    both) and read on every session restore.
    """
    table_name = "users"
    nullable_fields = ("phone", "business_id")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id: str = kwargs.get('id')
        self.name: str = kwargs.get('name') or ""
        self.email: str = kwargs.get('email') or ""
        self.phone: Optional[str] = kwargs.get('phone')
        self.role: str = kwargs.get('role') or UserRole.CUSTOMER.value
        self.business_id: Optional[str] = kwargs.get('business_id')

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def __repr__(self):
        return f"<UserProfile {self.email} ({self.role})>"
