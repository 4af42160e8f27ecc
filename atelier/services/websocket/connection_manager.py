"""WebSocket connection manager for the live dashboards."""
import asyncio
import json
import logging
from typing import Any, Callable, Dict

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages active WebSocket connections.

    Every connection gets an outbound queue so that synchronous callbacks
    (realtime handlers, notification timers) can publish without awaiting;
    a sender task per connection drains the queue onto the socket.
    """

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self._queues: Dict[str, asyncio.Queue] = {}

    async def connect(self, websocket: WebSocket, session_id: str):
        """Accept WebSocket connection and add to active connections."""
        await websocket.accept()
        self.active_connections[session_id] = websocket
        self._queues[session_id] = asyncio.Queue()
        logger.info(f"New WebSocket connection {session_id}. Total connections: {len(self.active_connections)}")

    def disconnect(self, session_id: str):
        """Remove WebSocket connection from active connections."""
        self.active_connections.pop(session_id, None)
        queue = self._queues.pop(session_id, None)
        if queue is not None:
            # Wake the sender so it can exit
            queue.put_nowait(None)
        logger.info(f"WebSocket {session_id} disconnected. Remaining connections: {len(self.active_connections)}")

    def publisher(self, session_id: str) -> Callable[[Dict[str, Any]], None]:
        """Callable enqueuing a message for one connection; a no-op once it is gone."""

        def publish(message: Dict[str, Any]) -> None:
            queue = self._queues.get(session_id)
            if queue is not None:
                queue.put_nowait(message)

        return publish

    async def run_sender(self, session_id: str):
        """Forward queued messages to the socket until the connection goes away."""
        queue = self._queues.get(session_id)
        websocket = self.active_connections.get(session_id)
        if queue is None or websocket is None:
            return

        while True:
            message = await queue.get()
            if message is None or session_id not in self.active_connections:
                return
            try:
                await websocket.send_text(json.dumps(message, default=str))
            except Exception as e:
                logger.error(f"Error sending to {session_id}: {e}")
                self.disconnect(session_id)
                return


# Global instance of the connection manager
manager = ConnectionManager()
