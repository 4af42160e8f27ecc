"""Live subscriptions and the reconciler that merges their events."""
from .events import ChangeEvent, ChangeType, Deleted, Inserted, Updated, event_from_payload
from .reconciler import LiveList, order_snapshot, reduce_rows
from .channels import LiveSubscription

__all__ = [
    "ChangeEvent",
    "ChangeType",
    "Deleted",
    "Inserted",
    "Updated",
    "event_from_payload",
    "LiveList",
    "order_snapshot",
    "reduce_rows",
    "LiveSubscription",
]
