"""Base model for Supabase operations."""
from typing import Dict, Any
from datetime import date, datetime


class SupabaseModel:
    """
    Base model for Supabase rows.

    The backend owns the rows; instances are transient, denormalized copies.
    """

    table_name: str = ""

    def __init__(self, **kwargs):
        """Initialize model with data."""
        for key, value in kwargs.items():
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SupabaseModel':
        """Create model instance from dictionary."""
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {key: value for key, value in self.__dict__.items() if not key.startswith('_')}

    def to_supabase_dict(self) -> Dict[str, Any]:
        """Convert model to Supabase-compatible dictionary."""
        data = self.to_dict()
        for key, value in data.items():
            if isinstance(value, (datetime, date)):
                data[key] = value.isoformat()
            elif hasattr(value, "value") and isinstance(getattr(value, "value"), str):
                data[key] = value.value
        return {key: value for key, value in data.items() if value is not None or key in self.nullable_fields}

    # Columns that are sent as explicit nulls rather than omitted
    nullable_fields: tuple = ()
