"""
Ephemeral notification queue (toasts) shown after actions succeed or fail.
"""
import asyncio
import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from atelier.config.settings import settings

logger = logging.getLogger(__name__)

# Ids are unique for the whole process, not just one center
_ids = itertools.count()


class NotificationSeverity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    id: int
    message: str
    severity: NotificationSeverity
    created_at: float
    expires_at: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "severity": self.severity.value,
            "created_at": self.created_at,
        }


@dataclass
class NotificationCenter:
    """
    Stack of notifications in arrival order.

    Each entry expires `ttl` seconds after it was enqueued or when dismissed.
    Expiry is evaluated lazily against `clock` on every read and, when an
    event loop is running, eagerly by a timer per entry so listeners see the
    removal. Removing one entry never touches another.
    """

    ttl: float = field(default_factory=lambda: settings.NOTIFICATION_TTL_SECONDS)
    clock: Callable[[], float] = time.monotonic
    on_change: Optional[Callable[[List[Notification]], None]] = None

    _entries: List[Notification] = field(default_factory=list, init=False)
    _timers: Dict[int, asyncio.TimerHandle] = field(default_factory=dict, init=False)
    _closed: bool = field(default=False, init=False)

    def notify(self, message: str, severity: str = NotificationSeverity.SUCCESS.value) -> Optional[Notification]:
        if self._closed:
            return None
        now = self.clock()
        entry = Notification(
            id=next(_ids),
            message=message,
            severity=NotificationSeverity(severity),
            created_at=now,
            expires_at=now + self.ttl,
        )
        self._entries.append(entry)
        self._schedule_expiry(entry)
        logger.debug(f"Notification {entry.id} ({entry.severity.value}): {message}")
        self._changed()
        return entry

    def dismiss(self, notification_id: int) -> bool:
        """Remove one entry; returns False if it was already gone."""
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()

        before = len(self._entries)
        self._entries = [n for n in self._entries if n.id != notification_id]
        removed = len(self._entries) != before
        if removed:
            self._changed()
        return removed

    def active(self) -> List[Notification]:
        """Entries not yet expired, oldest first."""
        now = self.clock()
        expired = [n for n in self._entries if n.expires_at <= now]
        if expired:
            self._entries = [n for n in self._entries if n.expires_at > now]
            for entry in expired:
                timer = self._timers.pop(entry.id, None)
                if timer is not None:
                    timer.cancel()
        return list(self._entries)

    def close(self) -> None:
        self._closed = True
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._entries = []

    def _schedule_expiry(self, entry: Notification) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timers[entry.id] = loop.call_later(self.ttl, self._expire, entry.id)

    def _expire(self, notification_id: int) -> None:
        self._timers.pop(notification_id, None)
        self.dismiss(notification_id)

    def _changed(self) -> None:
        if self.on_change is None or self._closed:
            return
        try:
            self.on_change(self.active())
        except Exception as e:
            logger.error(f"Notification listener failed: {e}")
