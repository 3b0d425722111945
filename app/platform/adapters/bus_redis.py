import json
import logging
from typing import AsyncIterator
from redis.asyncio import from_url as redis_from_url
from app.platform.ports.notification_bus import NotificationBusPort
from app.core.config import settings

log = logging.getLogger("notifications.bus.redis")

class RedisNotificationBus(NotificationBusPort):
    def __init__(self, url: str | None = None, prefix: str | None = None):
        url = url or settings.REDIS_URL
        if not url:
            raise RuntimeError("REDIS_URL not configured")
        self.redis = redis_from_url(url, encoding="utf-8", decode_responses=True)
        self.prefix = prefix or settings.NOTIFICATION_CHANNEL_PREFIX

    def channel(self, user_id: str) -> str:
        return f"{self.prefix}:{user_id}"

    async def publish(self, user_id: str, payload: dict) -> int:
        receivers = await self.redis.publish(self.channel(user_id), json.dumps(payload, default=str))
        log.debug(f"[REDIS BUS] PUBLISH channel={self.channel(user_id)} receivers={receivers}")
        return int(receivers)

    async def subscribe(self, user_id: str) -> AsyncIterator[dict]:
        pubsub = self.redis.pubsub()
        await pubsub.subscribe(self.channel(user_id))
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                yield json.loads(message["data"])
        finally:
            await pubsub.unsubscribe(self.channel(user_id))
            await pubsub.aclose()

    async def close(self) -> None:
        await self.redis.aclose()
