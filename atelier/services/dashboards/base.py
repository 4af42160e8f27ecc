"""Common lifecycle for live dashboard views."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from supabase import AsyncClient

from atelier.services.notifications import Notification, NotificationCenter
from atelier.services.realtime import ChangeEvent, LiveList, LiveSubscription

logger = logging.getLogger(__name__)

Publisher = Callable[[Dict[str, Any]], None]


class DashboardView:
    """
    A mounted dashboard: snapshots, live subscriptions and toasts.

    `mount()` opens the subscriptions before fetching, so that changes made
    while the fetch is in flight are queued on the lists and replayed over
    the snapshot. `unmount()` releases every subscription and freezes the
    lists; nothing published after that reaches the client.
    """

    name = "dashboard"

    def __init__(
        self,
        supabase: Optional[AsyncClient],
        notifications: Optional[NotificationCenter] = None,
        publish: Optional[Publisher] = None,
    ):
        self.supabase = supabase
        self.publish = publish
        self.notifications = notifications or NotificationCenter()
        self.notifications.on_change = self._on_notifications
        self.lists: Dict[str, LiveList] = {}
        self.subscriptions: List[LiveSubscription] = []
        self.loading = True
        self._unmounted = False
        self._tasks: set = set()

    @property
    def unmounted(self) -> bool:
        return self._unmounted

    def add_list(self, name: str) -> LiveList:
        live = LiveList(f"{self.name}.{name}", on_change=self._on_list_change)
        self.lists[name] = live
        return live

    def loaders(self) -> Dict[str, Callable[[], Awaitable[List[Dict[str, Any]]]]]:
        """List name -> coroutine fetching its snapshot."""
        return {}

    def subscription_targets(self) -> List[Dict[str, Any]]:
        """Keyword arguments for each LiveSubscription this view opens."""
        return []

    async def mount(self, live: bool = True) -> None:
        if live and self.supabase is not None:
            await self._open_subscriptions()
        await self.load()

    async def load(self) -> None:
        loaders = self.loaders()
        results = await asyncio.gather(
            *(loader() for loader in loaders.values()), return_exceptions=True
        )
        if self._unmounted:
            logger.debug(f"{self.name}: discarded snapshot fetched after unmount")
            return

        for list_name, result in zip(loaders, results):
            if isinstance(result, BaseException):
                logger.warning(f"{self.name}: loading {list_name} failed: {result}")
                result = []
            self.lists[list_name].load_snapshot(result)
        self.loading = False
        self._publish({"type": "snapshot", "data": self.snapshot()})

    async def _open_subscriptions(self) -> None:
        for target in self.subscription_targets():
            subscription = LiveSubscription(self.supabase, **target)
            self.subscriptions.append(subscription)
            # Each subscription stands alone; open() logs and swallows its own failure
            await subscription.open()

    async def unmount(self) -> None:
        if self._unmounted:
            return
        self._unmounted = True
        for subscription in self.subscriptions:
            await subscription.release()
        for live in self.lists.values():
            live.close()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self.notifications.close()
        logger.info(f"{self.name}: unmounted, {len(self.subscriptions)} subscription(s) released")

    def notify(self, message: str, severity: str = "info") -> None:
        if not self._unmounted:
            self.notifications.notify(message, severity)

    def dismiss(self, notification_id: int) -> bool:
        return self.notifications.dismiss(notification_id)

    def spawn(self, coro: Awaitable[Any]) -> None:
        """Run follow-up work tied to this view's lifetime."""
        if self._unmounted:
            coro.close()
            return
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def snapshot(self) -> Dict[str, Any]:
        return {name: live.rows for name, live in self.lists.items()}

    def _on_list_change(self, live: LiveList, event: Optional[ChangeEvent]) -> None:
        if event is None or self.loading:
            return
        self._publish({
            "type": "change",
            "list": live.name.split(".", 1)[-1],
            "event": event.type.value,
            "data": self.snapshot(),
        })

    def _on_notifications(self, active: List[Notification]) -> None:
        self._publish({"type": "notifications", "items": [n.to_dict() for n in active]})

    def _publish(self, message: Dict[str, Any]) -> None:
        if self._unmounted or self.publish is None:
            return
        try:
            self.publish(message)
        except Exception as e:
            logger.error(f"{self.name}: publish failed: {e}")


