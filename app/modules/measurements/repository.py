import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.modules.measurements.models import Measurement

class MeasurementRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, **data) -> Measurement:
        obj = Measurement(tenant_id=tenant_id, animal_id=animal_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    def _live(self, tenant_id: uuid.UUID):
        return [Measurement.tenant_id == tenant_id, Measurement.deleted_at.is_(None)]

    async def list_for_animal(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, limit: int = 50, offset: int = 0) -> tuple[Sequence[Measurement], int]:
        conds = [*self._live(tenant_id), Measurement.animal_id == animal_id]
        q = select(Measurement).where(*conds).order_by(Measurement.measured_at.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        total = await self.session.scalar(select(func.count()).select_from(Measurement).where(*conds))
        return res.scalars().all(), int(total or 0)

    async def latest_for_animals(self, tenant_id: uuid.UUID, animal_ids: list[uuid.UUID]) -> dict[uuid.UUID, Measurement]:
        if not animal_ids:
            return {}
        q = select(Measurement).where(
            *self._live(tenant_id), Measurement.animal_id.in_(animal_ids),
        ).order_by(Measurement.measured_at.desc())
        latest: dict[uuid.UUID, Measurement] = {}
        for m in (await self.session.execute(q)).scalars():
            latest.setdefault(m.animal_id, m)
        return latest
