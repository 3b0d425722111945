import uuid
from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.animals.models import Animal

class AnimalRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, tenant_id: uuid.UUID, **data) -> Animal:
        obj = Animal(tenant_id=tenant_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Animal | None:
        q = select(Animal).where(
            Animal.id == animal_id,
            Animal.tenant_id == tenant_id,
            Animal.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_tag(self, tenant_id: uuid.UUID, farm_id: uuid.UUID, tag_number: str) -> Animal | None:
        q = select(Animal).where(
            Animal.tenant_id == tenant_id,
            Animal.farm_id == farm_id,
            Animal.tag_number == tag_number,
            Animal.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    def _filtered(self, tenant_id: uuid.UUID, farm_id: uuid.UUID, filters: dict):
        conds = [
            Animal.tenant_id == tenant_id,
            Animal.farm_id == farm_id,
            Animal.deleted_at.is_(None),
        ]
        if filters.get("species"):
            conds.append(Animal.species == filters["species"])
        if filters.get("sex"):
            conds.append(Animal.sex == filters["sex"])
        if filters.get("status"):
            conds.append(Animal.status == filters["status"])
        if filters.get("breed"):
            conds.append(Animal.breed.ilike(f"%{filters['breed']}%"))
        if filters.get("search"):
            term = f"%{filters['search']}%"
            conds.append(or_(
                Animal.tag_number.ilike(term),
                Animal.breed.ilike(term),
                Animal.notes.ilike(term),
            ))
        return conds

    async def list(self, tenant_id: uuid.UUID, farm_id: uuid.UUID, filters: dict, limit: int = 20, offset: int = 0) -> tuple[Sequence[Animal], int]:
        conds = self._filtered(tenant_id, farm_id, filters)
        q = select(Animal).where(*conds).order_by(Animal.created_at.desc(), Animal.tag_number).limit(limit).offset(offset)
        res = await self.session.execute(q)
        total = await self.session.scalar(select(func.count()).select_from(Animal).where(*conds))
        return res.scalars().all(), int(total or 0)

    async def update(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, **data) -> Animal | None:
        obj = await self.get(tenant_id, animal_id)
        if not obj:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def soft_delete(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> bool:
        obj = await self.get(tenant_id, animal_id)
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
