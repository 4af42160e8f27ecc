"""
Live list reconciliation.

Merges an initial snapshot and a stream of change events into one ordered
list: newest inserts first, updates in place, deletes by id. Every live row
appears exactly once regardless of how events interleave with the snapshot.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from atelier.services.realtime.events import ChangeEvent, Deleted, Inserted, Updated

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _index_of(rows: List[Row], row_id: Any) -> int:
    for index, row in enumerate(rows):
        if row.get("id") == row_id:
            return index
    return -1


def reduce_rows(rows: List[Row], event: ChangeEvent) -> List[Row]:
    """
    Apply one change event and return the new list. Never mutates `rows`.

    INSERT of a known id and UPDATE/DELETE of an unknown id leave the list
    as it was.
    """
    if isinstance(event, Inserted):
        if _index_of(rows, event.id) >= 0:
            return rows
        return [dict(event.row)] + rows

    if isinstance(event, Updated):
        index = _index_of(rows, event.id)
        if index < 0:
            return rows
        merged = {**rows[index], **event.row}
        return rows[:index] + [merged] + rows[index + 1:]

    if isinstance(event, Deleted):
        index = _index_of(rows, event.id)
        if index < 0:
            return rows
        return rows[:index] + rows[index + 1:]

    logger.warning(f"Unknown change event {event!r}")
    return rows


def order_snapshot(rows: Iterable[Row]) -> List[Row]:
    """Deduplicate by id (first wins) and sort by `created_at`, newest first."""
    seen = set()
    unique = []
    for row in rows:
        row_id = row.get("id")
        if row_id in seen:
            continue
        seen.add(row_id)
        unique.append(dict(row))
    # ISO-8601 timestamps from the backend sort correctly as strings
    return sorted(unique, key=lambda r: str(r.get("created_at") or ""), reverse=True)


class LiveList:
    """
    Reconciled copy of one entity list for one view.

    Events that arrive before the snapshot are queued and replayed over it
    once it lands. After `close()` the list is frozen: late snapshots and
    events are dropped.
    """

    def __init__(self, name: str, on_change: Optional[Callable[["LiveList", Optional[ChangeEvent]], None]] = None):
        self.name = name
        self.on_change = on_change
        self._rows: List[Row] = []
        self._pending: List[ChangeEvent] = []
        self._loaded = False
        self._closed = False

    @property
    def rows(self) -> List[Row]:
        return list(self._rows)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._rows)

    def load_snapshot(self, rows: Iterable[Row]) -> None:
        if self._closed:
            logger.debug(f"{self.name}: snapshot arrived after close, discarded")
            return

        merged = order_snapshot(rows)
        for event in self._pending:
            merged = reduce_rows(merged, event)
        self._pending = []
        self._rows = merged
        self._loaded = True
        self._notify(None)

    def apply(self, event: ChangeEvent) -> bool:
        """Apply or queue one event. Returns True if the visible list changed."""
        if self._closed:
            return False
        if not self._loaded:
            self._pending.append(event)
            return False

        updated = reduce_rows(self._rows, event)
        if updated is self._rows:
            return False
        self._rows = updated
        self._notify(event)
        return True

    def get(self, row_id: Any) -> Optional[Row]:
        index = _index_of(self._rows, row_id)
        return dict(self._rows[index]) if index >= 0 else None

    def replace(self, row_id: Any, fields: Row) -> bool:
        """Local optimistic update after a successful write by this view."""
        return self.apply(Updated({**fields, "id": row_id}))

    def remove(self, row_id: Any) -> bool:
        return self.apply(Deleted(row_id))

    def close(self) -> None:
        self._closed = True
        self._pending = []
        self.on_change = None

    def _notify(self, event: Optional[ChangeEvent]) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(self, event)
        except Exception as e:
            logger.error(f"{self.name}: change listener failed: {e}")
