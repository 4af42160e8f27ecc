"""
Row change events delivered by live subscriptions.

Each Supabase postgres change is turned into one of three tagged variants,
so the reconciler never looks at the wire payload.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ALL = "*"


@dataclass(frozen=True)
class Inserted:
    row: Dict[str, Any] = field(hash=False)
    type: ChangeType = ChangeType.INSERT

    @property
    def id(self) -> Any:
        return self.row.get("id")


@dataclass(frozen=True)
class Updated:
    row: Dict[str, Any] = field(hash=False)
    type: ChangeType = ChangeType.UPDATE

    @property
    def id(self) -> Any:
        return self.row.get("id")


@dataclass(frozen=True)
class Deleted:
    id: Any
    old: Dict[str, Any] = field(default_factory=dict, hash=False)
    type: ChangeType = ChangeType.DELETE


ChangeEvent = Union[Inserted, Updated, Deleted]


def event_from_payload(payload: Dict[str, Any]) -> Optional[ChangeEvent]:
    """
    Build a change event from a realtime payload.

    Accepts the raw channel shape (`{"data": {"type", "record",
    "old_record"}}`) as well as the flattened client shape (`{"eventType",
    "new", "old"}`). Returns None for anything unrecognised.
    """
    if not isinstance(payload, dict):
        logger.warning(f"Ignoring non-dict realtime payload: {payload!r}")
        return None

    body = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    kind = body.get("type") or body.get("eventType")
    new = body.get("record") or body.get("new") or {}
    old = body.get("old_record") or body.get("old") or {}

    try:
        change = ChangeType(str(kind).upper())
    except ValueError:
        logger.warning(f"Ignoring realtime payload with unknown type {kind!r}")
        return None

    if change is ChangeType.INSERT and new.get("id") is not None:
        return Inserted(dict(new))
    if change is ChangeType.UPDATE and new.get("id") is not None:
        return Updated(dict(new))
    if change is ChangeType.DELETE and old.get("id") is not None:
        return Deleted(old["id"], dict(old))

    logger.warning(f"Ignoring {change.value} payload without a row id")
    return None
