"""Body measurement profile, one per customer."""
from atelier.models.base import SupabaseModel

MEASUREMENT_FIELDS = ("bust", "waist", "hip", "shoulder", "sleeve_length")


class Measurements(SupabaseModel):
    table_name = "measurements"
    nullable_fields = MEASUREMENT_FIELDS

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.user_id = kwargs.get('user_id')
        for field in MEASUREMENT_FIELDS:
            setattr(self, field, kwargs.get(field))

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, field) is None for field in MEASUREMENT_FIELDS)
