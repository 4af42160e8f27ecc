"""Supabase realtime channel management for live lists."""
import logging
from typing import Any, Callable, Dict, Optional

from supabase import AsyncClient

from atelier.services.realtime.events import ChangeEvent, ChangeType, event_from_payload

logger = logging.getLogger(__name__)


class LiveSubscription:
    """
    One push channel for one (table, scope) pair.

    `scope` is an optional `(column, value)` predicate, sent to the backend
    as `column=eq.value`. Opening failures are logged and leave the
    subscription inactive; they never propagate to sibling subscriptions.
    """

    def __init__(
        self,
        supabase: AsyncClient,
        name: str,
        table: str,
        handler: Callable[[ChangeEvent], None],
        event: ChangeType = ChangeType.ALL,
        scope: Optional[Dict[str, Any]] = None,
    ):
        self.supabase = supabase
        self.name = name
        self.table = table
        self.handler = handler
        self.event = event
        self.scope = scope or {}
        self._channel = None
        self._released = False

    @property
    def active(self) -> bool:
        return self._channel is not None and not self._released

    @property
    def filter(self) -> Optional[str]:
        if not self.scope:
            return None
        column, value = next(iter(self.scope.items()))
        return f"{column}=eq.{value}"

    async def open(self) -> bool:
        if self._released:
            return False
        try:
            channel = self.supabase.channel(self.name)
            options = {
                "event": self.event.value,
                "schema": "public",
                "table": self.table,
                "callback": self._on_payload,
            }
            if self.filter:
                options["filter"] = self.filter
            channel.on_postgres_changes(**options)
            await channel.subscribe()
        except Exception as e:
            logger.error(f"Failed to open live subscription {self.name} on {self.table}: {e}")
            return False

        self._channel = channel
        logger.info(f"Live subscription {self.name} open on {self.table} ({self.filter or 'all rows'})")
        return True

    def _on_payload(self, payload: Dict[str, Any]) -> None:
        if self._released:
            return
        event = event_from_payload(payload)
        if event is None:
            return
        try:
            self.handler(event)
        except Exception as e:
            logger.error(f"Live subscription {self.name} handler failed: {e}", exc_info=True)

    async def release(self) -> None:
        """Remove the channel; safe to call more than once."""
        if self._released:
            return
        self._released = True
        channel, self._channel = self._channel, None
        if channel is None:
            return
        try:
            await self.supabase.remove_channel(channel)
            logger.info(f"Live subscription {self.name} released")
        except Exception as e:
            logger.warning(f"Failed to release live subscription {self.name}: {e}")
