"""Inbound contact inquiry. Immutable once created."""
from atelier.models.base import SupabaseModel


class ContactMessage(SupabaseModel):
    table_name = "contact_messages"
    nullable_fields = ("phone",)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.name = kwargs.get('name')
        self.email = kwargs.get('email')
        self.phone = kwargs.get('phone')
        self.message = kwargs.get('message')
        self.created_at = kwargs.get('created_at')
