import logging
import uuid
from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.platform.ports.notification_bus import NotificationBusPort
from app.platform.provider_registry import registry
from app.modules.notifications.models import Notification, PENDING, DELIVERED, READ

log = logging.getLogger("notifications.service")

def to_payload(n: Notification) -> dict:
    return {
        "id": str(n.id),
        "type": n.type,
        "title": n.title,
        "message": n.message,
        "priority": n.priority,
        "metadata": n.meta or {},
        "status": n.status,
    }

class NotificationsService:
    def __init__(self, s: AsyncSession, bus: NotificationBusPort | None = None):
        self.s = s
        self.bus = bus or registry.notification_bus()

    async def create(self, tenant: uuid.UUID, user_id: uuid.UUID, *, type: str, title: str, message: str,
                     priority: str = "medium", metadata: dict | None = None) -> Notification:
        n = Notification(tenant_id=tenant, user_id=user_id, type=type, title=title, message=message,
                         priority=priority, meta=metadata or {}, status=PENDING)
        self.s.add(n); await self.s.flush(); await self.s.commit()

        receivers = await self.bus.publish(str(user_id), to_payload(n))
        if receivers > 0:
            n.transition(DELIVERED, datetime.now(timezone.utc))
            await self.s.commit()
        log.info(f"Notification {n.id} for user={user_id} receivers={receivers} status={n.status}")
        return n

    async def list_unread(self, tenant: uuid.UUID, user_id: uuid.UUID, limit: int = 50) -> Sequence[Notification]:
        q = select(Notification).where(
            Notification.tenant_id == tenant,
            Notification.user_id == user_id,
            Notification.status != READ,
            Notification.deleted_at.is_(None),
        ).order_by(Notification.created_at.desc()).limit(limit)
        res = await self.s.execute(q)
        return res.scalars().all()

    async def mark(self, tenant: uuid.UUID, user_id: uuid.UUID, ids: list[uuid.UUID], *, read: bool = True) -> int:
        q = select(Notification).where(
            Notification.tenant_id == tenant,
            Notification.user_id == user_id,
            Notification.id.in_(ids),
            Notification.deleted_at.is_(None),
        )
        rows = (await self.s.execute(q)).scalars().all()
        target = READ if read else DELIVERED
        now = datetime.now(timezone.utc)
        updated = 0
        for n in rows:
            if n.status == target:
                continue
            n.transition(target, now)
            updated += 1
        await self.s.commit()
        return updated
