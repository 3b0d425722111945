import asyncio
import logging
from collections import defaultdict
from typing import AsyncIterator
from app.platform.ports.notification_bus import NotificationBusPort

log = logging.getLogger("notifications.bus.memory")

class InMemoryNotificationBus(NotificationBusPort):
    """Single-process bus; every subscriber gets its own queue."""

    def __init__(self, max_queue: int = 100):
        self.max_queue = max_queue
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)

    def subscriber_count(self, user_id: str) -> int:
        return len(self._subscribers.get(str(user_id), ()))

    async def publish(self, user_id: str, payload: dict) -> int:
        delivered = 0
        for q in list(self._subscribers.get(str(user_id), ())):
            try:
                q.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                log.warning(f"[MEMORY BUS] dropping notification for slow subscriber user={user_id}")
        log.debug(f"[MEMORY BUS] user={user_id} delivered={delivered}")
        return delivered

    async def subscribe(self, user_id: str) -> AsyncIterator[dict]:
        key = str(user_id)
        q: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue)
        self._subscribers[key].add(q)
        try:
            while True:
                yield await q.get()
        finally:
            self._subscribers[key].discard(q)
            if not self._subscribers[key]:
                del self._subscribers[key]

    async def close(self) -> None:
        self._subscribers.clear()
