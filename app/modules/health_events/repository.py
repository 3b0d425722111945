import uuid
from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.modules.health_events.models import HealthEvent

class HealthEventRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, **data) -> HealthEvent:
        obj = HealthEvent(tenant_id=tenant_id, animal_id=animal_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, event_id: uuid.UUID) -> HealthEvent | None:
        q = select(HealthEvent).where(
            HealthEvent.id == event_id,
            HealthEvent.animal_id == animal_id,
            HealthEvent.tenant_id == tenant_id,
            HealthEvent.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_for_animal(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, *, type: str | None = None,
                              status: str | None = None, limit: int = 50, offset: int = 0) -> tuple[Sequence[HealthEvent], int]:
        conds = [
            HealthEvent.tenant_id == tenant_id,
            HealthEvent.animal_id == animal_id,
            HealthEvent.deleted_at.is_(None),
        ]
        if type:
            conds.append(HealthEvent.type == type)
        if status:
            conds.append(HealthEvent.status == status)
        q = select(HealthEvent).where(*conds).order_by(HealthEvent.date.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        total = await self.session.scalar(select(func.count()).select_from(HealthEvent).where(*conds))
        return res.scalars().all(), int(total or 0)

    async def recent_completed_vaccination(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, description: str,
                                           since: datetime) -> HealthEvent | None:
        q = select(HealthEvent).where(
            HealthEvent.tenant_id == tenant_id,
            HealthEvent.animal_id == animal_id,
            HealthEvent.type == "VACCINATION",
            HealthEvent.description == description,
            HealthEvent.status == "COMPLETED",
            HealthEvent.date >= since,
            HealthEvent.deleted_at.is_(None),
        ).limit(1)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def soft_delete(self, obj: HealthEvent) -> None:
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
